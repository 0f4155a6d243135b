"""Market dashboard: FRED and Yahoo Finance normalization engine."""

__version__ = "0.1.0"
