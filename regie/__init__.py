"""Régie: event staffing and schedule consistency engine."""

__version__ = "0.1.0"
