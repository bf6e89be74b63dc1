"""Visitor management console: REST client, service layer and page state."""

__version__ = "1.0.0"
