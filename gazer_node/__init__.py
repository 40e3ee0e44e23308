"""Monitoring node: sampling units, their configuration, and publishing of their values."""

__version__ = "0.1.0"