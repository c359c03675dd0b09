"""HTTP gateway in front of a managed identity provider."""

__version__ = "0.4.0"
