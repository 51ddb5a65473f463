"""Similarity store data models and row decoding."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.exceptions import DecodeError

EXTERNAL_REF_FIELDS = ("drupal_entity_id", "drupal_long_id")


class Document(BaseModel):
    """A stored document, without its embedding.

    Attributes:
        id: Document identifier.
        content: Document text.
        drupal_entity_id: Optional CMS entity reference.
        drupal_long_id: Optional long-form CMS reference.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Document identifier")
    content: str = Field(description="Document text")
    drupal_entity_id: str | None = Field(default=None, description="CMS entity id")
    drupal_long_id: str | None = Field(default=None, description="CMS long id")


class ScoredDocument(BaseModel):
    """A document returned by a nearest-neighbour query.

    Attributes:
        document: The matched document.
        similarity: Cosine similarity to the query (1 - cosine distance).
    """

    model_config = ConfigDict(frozen=True)

    document: Document
    similarity: float = Field(description="Cosine similarity")


def decode_point(point: Any) -> ScoredDocument:
    """Decode a scored store row into a ScoredDocument.

    Args:
        point: Row with `id`, `score` and `payload` attributes.

    Returns:
        The typed document and its similarity.

    Raises:
        DecodeError: If the row does not have the expected shape.
    """
    point_id = getattr(point, "id", None)
    if point_id is None:
        raise DecodeError("Stored row has no id")

    payload = getattr(point, "payload", None)
    if not isinstance(payload, dict):
        raise DecodeError(
            "Stored row has no payload",
            details={"id": str(point_id)},
        )

    content = payload.get("content")
    if not isinstance(content, str):
        raise DecodeError(
            "Stored row has no text content",
            details={"id": str(point_id), "content_type": type(content).__name__},
        )

    score = getattr(point, "score", None)
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise DecodeError(
            "Stored row has no similarity score",
            details={"id": str(point_id)},
        )

    refs = {name: _decode_ref(payload, name, point_id) for name in EXTERNAL_REF_FIELDS}

    return ScoredDocument(
        document=Document(id=str(point_id), content=content, **refs),
        similarity=float(score),
    )


def _decode_ref(payload: dict[str, Any], name: str, point_id: Any) -> str | None:
    value = payload.get(name)
    if value is None or value == "":
        return None
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise DecodeError(
            f"Stored row has malformed {name}",
            details={"id": str(point_id), "field": name},
        )
    return str(value)
