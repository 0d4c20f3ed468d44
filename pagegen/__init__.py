"""Markdown blog page generator."""

__version__ = "0.1.0"
