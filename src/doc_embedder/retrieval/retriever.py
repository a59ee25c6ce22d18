"""Semantic retriever — embed a query and search one namespace.

Usage::

    from doc_embedder.retrieval.retriever import SemanticRetriever

    retriever = SemanticRetriever()
    result    = retriever.search("What is the leave policy?", top_k=3, namespace="hr")
    if result is not None:
        for match in result.matches:
            print(match.id, match.score, match.text[:80])
"""

from __future__ import annotations

import logging

from doc_embedder.ingestion.embedder import EmbeddingClientBase
from doc_embedder.retrieval.base import VectorStoreBase
from doc_embedder.retrieval.models import QueryResult

logger = logging.getLogger(__name__)


class SemanticRetriever:
    """Query path over an :class:`EmbeddingClientBase` and a :class:`VectorStoreBase`.

    Parameters
    ----------
    embedder:
        Embedding client used for query texts.  Built from the global
        settings when *None*.
    store:
        Vector-store backend.  Built from the global settings when *None*.
    default_top_k:
        Number of results returned when *top_k* is not given.
    """

    def __init__(
        self,
        embedder: EmbeddingClientBase | None = None,
        store: VectorStoreBase | None = None,
        *,
        default_top_k: int = 5,
    ) -> None:
        if embedder is None:
            from doc_embedder.ingestion.embedder import get_embedding_client

            embedder = get_embedding_client()
        if store is None:
            from doc_embedder.retrieval.base import get_vector_store

            store = get_vector_store()
        self._embedder = embedder
        self._store = store
        self.default_top_k = default_top_k

    # -- public API -----------------------------------------------------------

    def search(
        self,
        query_text: str,
        *,
        top_k: int | None = None,
        namespace: str = "default",
    ) -> QueryResult | None:
        """Embed *query_text* and return the nearest passages in *namespace*.

        Raises ``ValueError`` when *top_k* is not positive.  Returns ``None``
        when the query could not be embedded (the store is not contacted)
        or when the store query itself failed.  Match metadata
        carries the original passage text under ``"text"``.
        """
        top_k = self._resolve_top_k(top_k)
        embedding = self._embedder.embed(query_text)
        if embedding is None:
            logger.warning("Could not embed query; skipping vector search")
            return None
        return self.search_by_embedding(embedding, top_k=top_k, namespace=namespace)

    def search_by_embedding(
        self,
        embedding: list[float],
        *,
        top_k: int | None = None,
        namespace: str = "default",
    ) -> QueryResult | None:
        """Same as :meth:`search` but accepts a pre-computed embedding."""
        return self._store.query(
            embedding,
            top_k=self._resolve_top_k(top_k),
            namespace=namespace,
            include_metadata=True,
        )

    def _resolve_top_k(self, top_k: int | None) -> int:
        if top_k is None:
            top_k = self.default_top_k
        if top_k < 1:
            raise ValueError(f"top_k must be a positive integer, got {top_k!r}")
        return top_k
