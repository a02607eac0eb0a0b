# noqa: D100
__version__ = "0.1.0"
