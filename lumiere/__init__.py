"""Lumière: editorial fashion image studio backed by the Gemini image model."""

__version__ = "1.0.0"
