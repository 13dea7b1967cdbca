"""Command-line bulk operations for a content management platform."""

__version__ = "0.1.0"
