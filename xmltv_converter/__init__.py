"""XMLTV guide to JSON schedule and thumbnail mosaic converter."""

__version__ = "0.1.0"
