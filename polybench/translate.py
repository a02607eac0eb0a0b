"""Rewrites generic SQL into the syntax of one backend through ordered pattern substitution."""

from typing import List, Mapping, Tuple


class DialectTranslator:
    """Holds the ordered (pattern, replacement) rules of one dialect.

    Rules are applied one after another in the order they were added, each replacing every occurrence of its
    pattern. Overlapping patterns are not resolved, so a rule can rewrite the output of an earlier rule.
    """

    def __init__(self, rules: List[Tuple[str, str]] = None):
        """Construct a translator.

        :param rules: the initial (pattern, replacement) pairs, in application order
        """
        self._rules = list(rules or [])

    @classmethod
    def from_properties(cls, dialect: str, properties: Mapping[str, str]) -> "DialectTranslator":
        """Extract the rules of a dialect from a flat property mapping.

        Keys look like ``<dialect>.<PATTERN_WITH_UNDERSCORES>``; underscores in the pattern become spaces and the
        pattern is upper cased. Rules keep the iteration order of the mapping.

        :param dialect: the dialect identifier, e.g. ``postgresql``
        :param properties: the mapping to select the dialect's keys from
        :returns: a translator holding the selected rules
        """
        prefix = f"{dialect}."
        translator = cls()
        for key, replacement in properties.items():
            if key.startswith(prefix):
                pattern = key[len(prefix):].replace("_", " ").upper()
                translator.add(pattern, replacement)
        return translator

    def add(self, pattern: str, replacement: str):
        """Append a rule, it is applied after every existing rule."""
        self._rules.append((pattern, replacement))

    @property
    def rules(self) -> Tuple[Tuple[str, str], ...]:
        """Return the rules in application order."""
        return tuple(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def translate(self, sql: str) -> str:
        """Apply every rule to the statement.

        :param sql: the generic SQL statement
        :returns: the backend specific statement
        """
        for pattern, replacement in self._rules:
            sql = sql.replace(pattern, replacement)
        return sql
