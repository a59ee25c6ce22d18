"""Domain models for passages, ingestion settings and run statistics."""

from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, PositiveInt


class Passage(BaseModel):
    """A retrieval-sized unit of text derived from a document.

    Attributes
    ----------
    id:
        Deterministic identifier ``{doc_name}_chunk_{chunk_index}``; stable
        across re-runs so repeated ingestion overwrites instead of duplicating.
    text:
        Literal passage content, trimmed.
    section_index:
        Index of the candidate section the passage was cut from.  Sub-chunks
        of one section share it.
    chunk_index:
        Dense 0-based ordinal of the passage within its document.
    word_count:
        Whitespace-delimited token count of ``text``.
    metadata:
        Record metadata as persisted in the vector index (camelCase keys,
        includes the text itself).
    """

    id: str
    text: str
    section_index: int
    chunk_index: int
    word_count: int
    metadata: dict[str, Any] = Field(default_factory=dict)


class IngestionSettings(BaseModel):
    """Per-run options recognised by :class:`~doc_embedder.ingestion.pipeline.DocumentIngestor`.

    Attributes
    ----------
    chunk_size:
        ``"auto"`` (one passage per section) or a positive character ceiling
        for re-splitting long sections.  Also accepted as ``chunkSize``.
    namespace:
        Target namespace, or ``"auto"`` to use each document's name.
    isolate_documents:
        When ``True`` a failure while processing one document is counted as a
        single error and the run continues; otherwise it aborts the run.

    Unknown keys are rejected.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    chunk_size: Union[Literal["auto"], PositiveInt] = Field(default="auto", alias="chunkSize")
    namespace: str = "default"
    isolate_documents: bool = False

    def resolve_namespace(self, doc_name: str) -> str:
        return doc_name if self.namespace == "auto" else self.namespace


class IngestionStats(BaseModel):
    """Success / error counters for one document or a whole run."""

    success: int = 0
    errors: int = 0

    def __add__(self, other: IngestionStats) -> IngestionStats:
        return IngestionStats(
            success=self.success + other.success,
            errors=self.errors + other.errors,
        )

    @property
    def total(self) -> int:
        return self.success + self.errors
