"""Ingestion orchestrator — documents → passages → embeddings → vector index.

Processing is strictly sequential: documents in mapping order, passages in
``chunk_index`` order.  A failing passage is counted and skipped; it never
aborts its document.  Anything that escapes the per-passage boundary aborts
the run and collapses the result to ``{"success": 0, "errors": 1}``, unless
``isolate_documents`` is set, in which case only that document is lost.

Usage::

    from doc_embedder.ingestion.pipeline import DocumentIngestor

    ingestor = DocumentIngestor()
    stats = ingestor.ingest({"handbook": text}, {"chunk_size": 800, "namespace": "hr"})
    print(stats.model_dump())
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from doc_embedder.ingestion.chunker import chunk_document
from doc_embedder.ingestion.embedder import EmbeddingClientBase
from doc_embedder.ingestion.models import IngestionSettings, IngestionStats, Passage
from doc_embedder.ingestion.pacing import FixedIntervalPacer
from doc_embedder.ingestion.samples import get_sample_documents
from doc_embedder.retrieval.base import VectorStoreBase

logger = logging.getLogger(__name__)


class DocumentIngestor:
    """Drive chunking, embedding and vector storage for a set of documents.

    Parameters
    ----------
    embedder:
        Embedding client.  Built from the global settings when *None*.
    store:
        Vector-store backend.  Built from the global settings when *None*.
    pacer:
        Rate-limiting policy.  Defaults to the delays configured in settings.
    """

    def __init__(
        self,
        embedder: EmbeddingClientBase | None = None,
        store: VectorStoreBase | None = None,
        *,
        pacer: FixedIntervalPacer | None = None,
    ) -> None:
        if embedder is None or store is None or pacer is None:
            from doc_embedder.config import settings

            if embedder is None:
                from doc_embedder.ingestion.embedder import get_embedding_client

                embedder = get_embedding_client(settings)
            if store is None:
                from doc_embedder.retrieval.base import get_vector_store

                store = get_vector_store(settings)
            if pacer is None:
                pacer = FixedIntervalPacer(
                    settings.passage_delay_seconds, settings.document_delay_seconds
                )
        self._embedder = embedder
        self._store = store
        self._pacer = pacer

    # -- public API -----------------------------------------------------------

    def ingest(
        self,
        documents: Mapping[str, str] | None = None,
        settings: IngestionSettings | Mapping[str, Any] | None = None,
    ) -> IngestionStats:
        """Embed and store every passage of every document.

        Parameters
        ----------
        documents:
            Document name → raw text, processed in insertion order.  When
            *None* the built-in sample documents are used.
        settings:
            :class:`IngestionSettings` or a plain mapping of its fields.

        Returns
        -------
        IngestionStats
            Summed success / error counts for the run.
        """
        opts = _coerce_settings(settings)
        if documents is None:
            documents = get_sample_documents()
            logger.info("Using sample documents for demonstration...")

        logger.info(
            "Starting document embedding: %d documents, chunk_size=%s, namespace=%s",
            len(documents), opts.chunk_size, opts.namespace,
        )

        try:
            totals = IngestionStats()
            names = list(documents)
            for position, doc_name in enumerate(names):
                totals = totals + self._ingest_one(doc_name, documents[doc_name], opts)
                if position < len(names) - 1:
                    self._pacer.between_documents()
        except Exception:
            logger.exception("Error in embedding run; discarding partial statistics")
            return IngestionStats(success=0, errors=1)

        logger.info(
            "Embedding complete: %d chunks stored, %d errors", totals.success, totals.errors
        )
        return totals

    def ingest_document(
        self,
        doc_name: str,
        content: str,
        settings: IngestionSettings | Mapping[str, Any] | None = None,
    ) -> IngestionStats:
        """Chunk, embed and store a single document (no run-level boundary)."""
        opts = _coerce_settings(settings)
        passages = chunk_document(content, doc_name, opts.chunk_size)
        return self.store_passages(passages, opts.resolve_namespace(doc_name))

    def store_passages(self, passages: Sequence[Passage], namespace: str) -> IngestionStats:
        """Embed and upsert *passages* into *namespace*, one at a time."""
        logger.info("Storing %d chunks in namespace: %s", len(passages), namespace)
        stats = IngestionStats()

        for i, passage in enumerate(passages, 1):
            logger.debug("Processing chunk %d/%d: %s", i, len(passages), passage.id)
            try:
                if self._store_passage(passage, namespace):
                    stats.success += 1
                else:
                    stats.errors += 1
            except Exception:
                logger.exception("Error processing chunk %s", passage.id)
                stats.errors += 1
            finally:
                self._pacer.after_passage()

        return stats

    # -- internals ------------------------------------------------------------

    def _ingest_one(self, doc_name: str, content: str, opts: IngestionSettings) -> IngestionStats:
        logger.info("Processing %s document...", doc_name)
        try:
            stats = self.ingest_document(doc_name, content, opts)
        except Exception:
            if not opts.isolate_documents:
                raise
            logger.exception("Document %s failed; continuing with the next one", doc_name)
            return IngestionStats(success=0, errors=1)

        logger.info("%s: %d chunks embedded, %d errors", doc_name, stats.success, stats.errors)
        return stats

    def _store_passage(self, passage: Passage, namespace: str) -> bool:
        embedding = self._embedder.embed(passage.text)
        if embedding is None:
            logger.error("Failed to get embedding for chunk %s", passage.id)
            return False

        stored = self._store.upsert(passage.id, embedding, passage.metadata, namespace)
        if stored:
            logger.info("Stored: %s", passage.id)
        else:
            logger.error("Failed to store: %s", passage.id)
        return stored


def _coerce_settings(settings: IngestionSettings | Mapping[str, Any] | None) -> IngestionSettings:
    if settings is None:
        return IngestionSettings()
    if isinstance(settings, IngestionSettings):
        return settings
    return IngestionSettings.model_validate(dict(settings))
