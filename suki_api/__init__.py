"""Suki API: product catalog, health check and loyalty transactions."""

__version__ = "1.0.0"
