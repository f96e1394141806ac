"""Process sampling from procfs, column values, configuration and terminal styling."""

__version__ = "0.1.0"