"""Namma Bengaluru Guide: location-aware place recommendations backed by Gemini."""

__version__ = "0.1.0"
