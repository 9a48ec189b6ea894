"""Segment resolution and timeline reconstruction for AI-assisted rough cuts."""

__version__ = "0.1.0"
