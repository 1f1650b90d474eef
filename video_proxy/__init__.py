"""Streaming video proxy with range and cross-origin support."""

__version__ = "0.4.0"
