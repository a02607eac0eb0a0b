"""Loading of benchmark properties files and the targets they configure."""

import configparser
import logging
from typing import Dict, List, Mapping

from polybench.context import BenchContext
from polybench.target import DatabaseTarget

logger = logging.getLogger(__name__)

_SECTION = "properties"


def load_properties(path: str) -> Dict[str, str]:
    """Read a ``key=value`` properties file.

    Keys keep their case and the order of the file, a repeated key keeps its last value. ``#`` and ``;`` start
    comment lines.

    :param path: the file to read
    :returns: the properties in file order
    """
    parser = configparser.ConfigParser(
        interpolation=None, delimiters=("=",), comment_prefixes=("#", ";"), strict=False
    )
    parser.optionxform = str
    with open(path, "r") as fh:
        parser.read_string(f"[{_SECTION}]\n{fh.read()}", source=path)
    return dict(parser.items(_SECTION))


def load_targets(context: BenchContext, properties: Mapping[str, str]) -> List[DatabaseTarget]:
    """Build the targets configured as ``db1``, ``db2``, ... up to the first missing key.

    Targets that fail to parse are skipped, every other target gets the translations found in the properties.

    :param context: the run settings shared by every target
    :param properties: the benchmark properties
    :returns: the targets in configuration order
    """
    targets = []
    target_id = 1
    while f"db{target_id}" in properties:
        target = DatabaseTarget.parse(context, target_id, properties[f"db{target_id}"])
        if target is not None:
            target.set_translations(properties)
            targets.append(target)
        target_id += 1
    logger.info(f"Loaded {len(targets)} database target(s)")
    return targets
