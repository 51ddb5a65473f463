"""Semantic search pipeline."""

from src.search.models import Query, ScoredResult, SearchResponse
from src.search.service import SearchOrchestrator

__all__ = [
    "Query",
    "ScoredResult",
    "SearchOrchestrator",
    "SearchResponse",
]
