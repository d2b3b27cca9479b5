"""Core of a small stack-based language: types, arities, analysis and an interpreter."""

__version__ = "0.1.0"