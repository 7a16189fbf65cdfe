"""Content discovery engine for a catalog of addons."""

__version__ = "0.1.0"
