"""Abstract base class for vector-store backends.

Adding a new backend (Qdrant, Weaviate, …) only requires subclassing
:class:`VectorStoreBase` and implementing the three abstract methods.
The ingestion and retrieval layers are backend-agnostic.

Transport and provider faults never raise out of these methods: writes
report ``False`` and reads report ``None``.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from doc_embedder.retrieval.models import QueryResult

if TYPE_CHECKING:
    from doc_embedder.config import Settings

logger = logging.getLogger(__name__)


class VectorStoreBase(ABC):
    """Backend-agnostic, namespaced vector-store interface."""

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def upsert(
        self,
        record_id: str,
        values: list[float],
        metadata: dict[str, Any],
        namespace: str,
    ) -> bool:
        """Insert or replace one record in *namespace*.

        Returns ``True`` when the backend acknowledged the write.
        """
        ...

    @abstractmethod
    def query(
        self,
        values: list[float],
        *,
        top_k: int = 5,
        namespace: str = "default",
        include_metadata: bool = True,
    ) -> QueryResult | None:
        """Return the *top_k* records nearest to *values* in *namespace*.

        Matches are ordered by descending similarity.  ``None`` signals a
        failed query, which is distinct from an empty result.
        """
        ...

    @abstractmethod
    def describe_index(self) -> dict[str, Any] | None:
        """Return index-level statistics, or ``None`` when unreachable."""
        ...

    # -- optional overrides ---------------------------------------------------

    def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        return self.describe_index() is not None


def check_connection(store: VectorStoreBase) -> bool:
    """Probe *store* and log the outcome.  Run before an ingestion run."""
    logger.info("Testing %s connection...", type(store).__name__)
    stats = store.describe_index()
    if stats is None:
        logger.error("%s connection failed", type(store).__name__)
        return False
    logger.info("%s connection successful", type(store).__name__)
    logger.info("Index stats: %s", json.dumps(stats, indent=2, default=str))
    return True


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def get_vector_store(config: Settings | None = None) -> VectorStoreBase:
    """Return the backend selected by ``config.vector_store``.

    Backends are imported lazily so ``chromadb`` is only required when the
    Chroma backend is actually used.
    """
    if config is None:
        from doc_embedder.config import settings as config

    backend = config.vector_store.lower()
    if backend == "pinecone":
        from doc_embedder.retrieval.pinecone_store import PineconeVectorStore

        return PineconeVectorStore(
            config.pinecone_host,
            config.pinecone_api_key,
            timeout=config.request_timeout,
        )
    if backend == "chroma":
        from doc_embedder.retrieval.chroma_store import ChromaVectorStore

        return ChromaVectorStore(
            host=config.chroma_host,
            port=config.chroma_port,
            collection_prefix=config.chroma_collection_prefix,
        )
    raise ValueError(
        f"Unsupported vector_store={config.vector_store!r}. "
        "Choose from: pinecone, chroma."
    )
