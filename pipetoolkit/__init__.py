"""Utility toolkit: URL and base64 codecs, local time, file helpers, events, JSON values and log channels."""

__version__ = "0.1.0"