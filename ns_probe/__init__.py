"""Resolve a hostname and optionally probe each address with a TCP connect."""

__version__ = "1.0.0"
