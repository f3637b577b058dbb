"""Ghostline - autocomplete engine for interactive command shells"""

__version__ = "0.3.0"
