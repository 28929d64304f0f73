"""Dealr mission automation client."""

__version__ = "1.0.0"
