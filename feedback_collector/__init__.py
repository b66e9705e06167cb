"""Feedback Collector: feedback submission API and admin dashboard."""

__version__ = "0.1.0"
