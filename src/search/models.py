"""Search pipeline data models."""

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from src.vectorstore.models import ScoredDocument


class Query(BaseModel):
    """An accepted search request.

    Attributes:
        text: Free-text query.
        limit: Maximum results; the configured default applies when None.
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(min_length=1, description="Search text")
    limit: int | None = Field(default=None, description="Maximum results")

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("query must not be blank")
        return value


class ScoredResult(BaseModel):
    """A matched document with its similarity to the query.

    Attributes:
        id: Document identifier.
        content: Document text.
        drupal_entity_id: Optional CMS entity reference.
        drupal_long_id: Optional long-form CMS reference.
        similarity: Cosine similarity in [-1, 1].
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Document identifier")
    content: str = Field(description="Document text")
    drupal_entity_id: str | None = Field(default=None, description="CMS entity id")
    drupal_long_id: str | None = Field(default=None, description="CMS long id")
    similarity: float = Field(description="Cosine similarity")

    @classmethod
    def from_scored_document(cls, scored: ScoredDocument) -> Self:
        """Build a result from a store match."""
        doc = scored.document
        return cls(
            id=doc.id,
            content=doc.content,
            drupal_entity_id=doc.drupal_entity_id,
            drupal_long_id=doc.drupal_long_id,
            similarity=scored.similarity,
        )


class SearchResponse(BaseModel):
    """Response of the search tool.

    Attributes:
        results: Matches ordered by descending similarity.
        query: The query text as received.
        count: Number of results.
    """

    results: list[ScoredResult] = Field(default_factory=list)
    query: str = Field(description="Query text")
    count: int = Field(ge=0, description="Number of results")

    @model_validator(mode="after")
    def _check_consistency(self) -> Self:
        if self.count != len(self.results):
            raise ValueError(
                f"count ({self.count}) does not match results ({len(self.results)})"
            )
        for prev, cur in zip(self.results, self.results[1:]):
            if cur.similarity > prev.similarity:
                raise ValueError("results must be ordered by descending similarity")
        return self

    @classmethod
    def from_results(cls, query: str, results: list[ScoredResult]) -> Self:
        return cls(results=results, query=query, count=len(results))
