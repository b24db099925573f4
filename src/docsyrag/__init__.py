"""Retrieval-augmented generation core for Docsy notebooks."""

__version__ = "0.1.0"
