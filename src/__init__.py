"""Phase2 semantic search tool service."""

__version__ = "0.1.0"
