"""Trade journal: trade log storage and performance analytics."""

__version__ = "0.4.0"
