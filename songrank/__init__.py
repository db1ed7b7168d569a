"""Pairwise comparison ranking engine for songs."""

__version__ = "0.1.0"
