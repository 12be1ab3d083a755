"""git-oops - safer, higher-level git workflows with automatic recovery markers."""

__version__ = "0.1.0"
