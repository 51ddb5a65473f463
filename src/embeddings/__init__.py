"""Embedding provider module."""

from src.embeddings.models import EmbeddingResult
from src.embeddings.service import Embedder, OpenAIEmbedder

__all__ = [
    "Embedder",
    "EmbeddingResult",
    "OpenAIEmbedder",
]
