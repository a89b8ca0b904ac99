"""Normalize round-robin multipathing on the volumes of a vSphere cluster."""

__version__ = "0.1.0"
