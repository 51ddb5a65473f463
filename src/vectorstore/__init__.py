"""Similarity store module."""

from src.vectorstore.models import Document, ScoredDocument, decode_point
from src.vectorstore.pool import ConnectionManager
from src.vectorstore.service import QdrantSimilarityStore, SimilarityStore

__all__ = [
    "ConnectionManager",
    "Document",
    "QdrantSimilarityStore",
    "ScoredDocument",
    "SimilarityStore",
    "decode_point",
]
