"""Typed client binding for the provider private-network API."""

__version__ = "0.1.0"
