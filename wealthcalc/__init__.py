"""Projection and tax computation engine for Indian savings instruments."""

__version__ = "0.1.0"
