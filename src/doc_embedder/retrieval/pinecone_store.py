"""Pinecone implementation of the vector-store abstraction (REST data plane)."""

from __future__ import annotations

import logging
from typing import Any

import requests

from doc_embedder.retrieval.base import VectorStoreBase
from doc_embedder.retrieval.models import QueryMatch, QueryResult

logger = logging.getLogger(__name__)


class PineconeVectorStore(VectorStoreBase):
    """Pinecone index reached through its HTTP data-plane API.

    Parameters
    ----------
    host:
        Index host URL (``https://<index>-<project>.svc.<env>.pinecone.io``).
    api_key:
        Pinecone API key, sent as the ``Api-Key`` header.
    timeout:
        Per-request timeout in seconds.
    session:
        Optional pre-configured ``requests.Session``.
    """

    def __init__(
        self,
        host: str,
        api_key: str,
        *,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self._host = host.rstrip("/")
        self._timeout = timeout
        self._session = session if session is not None else requests.Session()
        self._session.headers.update(
            {"Content-Type": "application/json", "Api-Key": api_key}
        )

    # -- internals ------------------------------------------------------------

    def _post(self, path: str, payload: dict[str, Any]) -> requests.Response | None:
        try:
            resp = self._session.post(
                f"{self._host}{path}", json=payload, timeout=self._timeout
            )
        except requests.RequestException as exc:
            logger.error("Pinecone request to %s failed: %s", path, exc)
            return None
        if not 200 <= resp.status_code < 300:
            logger.error("Pinecone API error on %s: %d: %s", path, resp.status_code, resp.text[:500])
            return None
        return resp

    # -- VectorStoreBase overrides --------------------------------------------

    def upsert(
        self,
        record_id: str,
        values: list[float],
        metadata: dict[str, Any],
        namespace: str,
    ) -> bool:
        payload = {
            "vectors": [{"id": record_id, "values": values, "metadata": metadata}],
            "namespace": namespace,
        }
        return self._post("/vectors/upsert", payload) is not None

    def query(
        self,
        values: list[float],
        *,
        top_k: int = 5,
        namespace: str = "default",
        include_metadata: bool = True,
    ) -> QueryResult | None:
        payload = {
            "vector": values,
            "topK": top_k,
            "namespace": namespace,
            "includeMetadata": include_metadata,
        }
        resp = self._post("/query", payload)
        if resp is None:
            return None

        try:
            body = resp.json()
            matches = [
                QueryMatch(
                    id=m["id"],
                    score=m.get("score", 0.0),
                    metadata=m.get("metadata") or {},
                    values=m.get("values") or None,
                )
                for m in body.get("matches", [])
            ]
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.error("Malformed Pinecone query response: %s", exc)
            return None

        matches.sort(key=lambda m: m.score, reverse=True)
        return QueryResult(matches=matches, namespace=body.get("namespace", namespace))

    def describe_index(self) -> dict[str, Any] | None:
        resp = self._post("/describe_index_stats", {})
        if resp is None:
            return None
        try:
            stats = resp.json()
        except ValueError as exc:
            logger.error("Malformed Pinecone stats response: %s", exc)
            return None
        return stats if isinstance(stats, dict) else None
