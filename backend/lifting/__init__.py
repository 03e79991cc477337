"""Strength-training progression backend."""

__version__ = "0.1.0"
