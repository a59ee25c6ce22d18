"""Domain models for similarity-query results."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class QueryMatch(BaseModel):
    """One nearest-neighbour hit returned by a vector store.

    Attributes
    ----------
    id:
        Record identifier, e.g. ``"handbook_chunk_3"``.
    score:
        Similarity score (higher = more similar).
    metadata:
        Metadata stored with the record; empty when not requested.
    values:
        The stored vector, when the backend returns it.
    """

    id: str
    score: float = 0.0
    metadata: dict[str, Any] = Field(default_factory=dict)
    values: list[float] | None = None

    @property
    def text(self) -> str:
        """Original passage text, as duplicated into the record metadata."""
        return str(self.metadata.get("text", ""))

    def __str__(self) -> str:  # noqa: D105
        return f"[{self.id} {self.score:.3f}] {self.text[:120]}"


class QueryResult(BaseModel):
    """Ranked matches for one query, most similar first."""

    matches: list[QueryMatch] = Field(default_factory=list)
    namespace: str = ""

    def texts(self) -> list[str]:
        return [m.text for m in self.matches]
