"""Translate tabular model metadata (captions, descriptions, display folders)."""

__version__ = "0.1.0"
