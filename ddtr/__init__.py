"""Translate a single key into every configured Java .properties bundle."""

__version__ = "0.1.0"
