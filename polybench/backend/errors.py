"""Defines common errors raised from database backend code."""


class UnsupportedBackendError(Exception):
    """Raised when an unsupported backend is specified."""

    pass


class ConfigurationError(Exception):
    """Raised when a target or backend is misconfigured."""

    pass


class BackendNotInstalledError(Exception):
    """Raised when the DB API 2.0 driver module for a backend cannot be imported."""

    pass
