"""Find and score GitHub repositories for open-source contribution."""

__version__ = "0.1.0"
