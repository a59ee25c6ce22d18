"""Chroma implementation of the vector-store abstraction.

Chroma has no namespaces, so each namespace maps to its own collection
named ``{collection_prefix}{namespace}``.
"""

from __future__ import annotations

import logging
from typing import Any

import chromadb

from doc_embedder.retrieval.base import VectorStoreBase
from doc_embedder.retrieval.models import QueryMatch, QueryResult

logger = logging.getLogger(__name__)


class ChromaVectorStore(VectorStoreBase):
    """Chroma-backed vector store.

    Parameters
    ----------
    host:
        Chroma server hostname.
    port:
        Chroma server port.
    collection_prefix:
        Prefix prepended to every namespace to form the collection name.
    client:
        Optional pre-built Chroma client (e.g. ``chromadb.EphemeralClient()``).
    """

    def __init__(
        self,
        *,
        host: str = "localhost",
        port: int = 8000,
        collection_prefix: str = "doc_embedder_",
        client: Any = None,
    ) -> None:
        self._client = client if client is not None else chromadb.HttpClient(host=host, port=port)
        self.collection_prefix = collection_prefix
        self._collections: dict[str, Any] = {}

    def _collection(self, namespace: str) -> Any:
        if namespace not in self._collections:
            self._collections[namespace] = self._client.get_or_create_collection(
                f"{self.collection_prefix}{namespace}"
            )
        return self._collections[namespace]

    # -- VectorStoreBase overrides --------------------------------------------

    def upsert(
        self,
        record_id: str,
        values: list[float],
        metadata: dict[str, Any],
        namespace: str,
    ) -> bool:
        try:
            self._collection(namespace).upsert(
                ids=[record_id],
                embeddings=[values],
                metadatas=[metadata],
                documents=[str(metadata.get("text", ""))],
            )
        except Exception:
            logger.error("Chroma upsert of %s into %r failed", record_id, namespace, exc_info=True)
            return False
        return True

    def query(
        self,
        values: list[float],
        *,
        top_k: int = 5,
        namespace: str = "default",
        include_metadata: bool = True,
    ) -> QueryResult | None:
        include = ["metadatas", "distances"] if include_metadata else ["distances"]
        try:
            results = self._collection(namespace).query(
                query_embeddings=[values],
                n_results=top_k,
                include=include,
            )
        except Exception:
            logger.error("Chroma query on %r failed", namespace, exc_info=True)
            return None

        ids = (results.get("ids") or [[]])[0]
        distances = (results.get("distances") or [[]])[0]
        metas = (results.get("metadatas") or [[]])[0] if include_metadata else []

        matches: list[QueryMatch] = []
        for i, (record_id, dist) in enumerate(zip(ids, distances)):
            meta = metas[i] if i < len(metas) else None
            # Chroma returns L2 distances; convert to a 0-1 similarity score.
            matches.append(
                QueryMatch(id=record_id, score=1.0 / (1.0 + dist), metadata=meta or {})
            )
        matches.sort(key=lambda m: m.score, reverse=True)
        return QueryResult(matches=matches, namespace=namespace)

    def describe_index(self) -> dict[str, Any] | None:
        try:
            heartbeat = self._client.heartbeat()
            collections = self._client.list_collections()
        except Exception:
            logger.warning("Chroma health-check failed", exc_info=True)
            return None

        names = [getattr(c, "name", c) for c in collections]
        namespaces = sorted(
            n[len(self.collection_prefix):] for n in names if str(n).startswith(self.collection_prefix)
        )
        return {"heartbeat": heartbeat, "namespaces": namespaces}
