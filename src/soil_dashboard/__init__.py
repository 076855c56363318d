"""Soil sensor analytics: synthetic readings, trends, alerts and weekly reports."""

__version__ = "0.1.0"
