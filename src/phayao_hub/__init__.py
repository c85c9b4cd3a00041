"""Phayao Hub: community portal API and session-aware client."""

__version__ = "1.0.0"
