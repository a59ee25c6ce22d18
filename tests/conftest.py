"""Shared pytest configuration and fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from doc_embedder.ingestion.embedder import EmbeddingClientBase
from doc_embedder.ingestion.pacing import FixedIntervalPacer
from doc_embedder.retrieval.base import VectorStoreBase
from doc_embedder.retrieval.models import QueryMatch, QueryResult


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


# ── Fakes for deterministic testing ─────────────────────────────────────


class FakeEmbedder(EmbeddingClientBase):
    """Returns a fixed vector (or ``None``) and records every text."""

    def __init__(self, vector: list[float] | None = None, fail: bool = False) -> None:
        self.vector = vector if vector is not None else [0.1, 0.2, 0.3]
        self.fail = fail
        self.calls: list[str] = []

    def embed(self, text: str) -> list[float] | None:
        self.calls.append(text)
        return None if self.fail else list(self.vector)


class FakeVectorStore(VectorStoreBase):
    """In-memory namespaced store; can be told to fail writes or reads."""

    def __init__(self, *, fail_upserts: bool = False, fail_queries: bool = False) -> None:
        self.fail_upserts = fail_upserts
        self.fail_queries = fail_queries
        self.records: dict[str, dict[str, dict[str, Any]]] = {}
        self.upsert_calls: list[tuple[str, str]] = []
        self.query_calls: list[dict[str, Any]] = []
        self.reachable = True

    def upsert(self, record_id, values, metadata, namespace) -> bool:  # noqa: ANN001
        self.upsert_calls.append((record_id, namespace))
        if self.fail_upserts:
            return False
        self.records.setdefault(namespace, {})[record_id] = {"values": values, "metadata": metadata}
        return True

    def query(self, values, *, top_k=5, namespace="default", include_metadata=True):  # noqa: ANN001
        self.query_calls.append(
            {"values": values, "top_k": top_k, "namespace": namespace, "include_metadata": include_metadata}
        )
        if self.fail_queries:
            return None
        records = self.records.get(namespace, {})
        matches = [
            QueryMatch(id=rid, score=1.0 - i * 0.1, metadata=rec["metadata"] if include_metadata else {})
            for i, (rid, rec) in enumerate(records.items())
        ]
        return QueryResult(matches=matches[:top_k], namespace=namespace)

    def describe_index(self) -> dict[str, Any] | None:
        if not self.reachable:
            return None
        return {"namespaces": {ns: {"vectorCount": len(r)} for ns, r in self.records.items()}}


class RecordingSleep:
    """Stand-in for ``time.sleep`` that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


# ── Fixtures ────────────────────────────────────────────────────────────


@pytest.fixture()
def fake_embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture()
def fake_store() -> FakeVectorStore:
    return FakeVectorStore()


@pytest.fixture()
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture()
def pacer(recording_sleep: RecordingSleep) -> FixedIntervalPacer:
    return FixedIntervalPacer(2.0, 3.0, sleep=recording_sleep)
