"""Skip redundant CI workflow runs and cancel outdated ones."""

__version__ = "0.3.0"
