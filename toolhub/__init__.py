"""Toolhub API: exchange rates and preferences for the multi-tool site."""

__version__ = "0.1.0"
