"""A web-based reader for Markdown documentation trees: scanning, rendering and a WSGI server."""

__version__ = "0.1.6"
__all__ = ["__version__"]