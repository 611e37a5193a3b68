"""Xibo CMS tools for AI agents."""

__version__ = "1.0.0"
