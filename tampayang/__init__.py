"""Rules, exports and HTTP clients for an infrastructure damage reporting service."""

__version__ = "0.1.0"