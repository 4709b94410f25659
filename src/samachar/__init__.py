"""Samachar - Hindi news rewrite pipeline."""

__version__ = "0.1.0"
