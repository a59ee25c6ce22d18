"""Unit tests for the vector-store backends, connection check and factory."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

from doc_embedder.config import Settings
from doc_embedder.retrieval.base import check_connection, get_vector_store
from doc_embedder.retrieval.models import QueryResult
from doc_embedder.retrieval.pinecone_store import PineconeVectorStore

HOST = "https://idx-123.svc.pinecone.io"


def _response(status: int = 200, body=None, text: str = "") -> MagicMock:  # noqa: ANN001
    resp = MagicMock(status_code=status, text=text)
    if isinstance(body, Exception):
        resp.json.side_effect = body
    else:
        resp.json.return_value = body
    return resp


# ── Pinecone ────────────────────────────────────────────────────────────


@pytest.fixture()
def session() -> MagicMock:
    s = MagicMock()
    s.headers = {}
    return s


@pytest.fixture()
def pinecone(session: MagicMock) -> PineconeVectorStore:
    return PineconeVectorStore(HOST + "/", "pc-key", timeout=7, session=session)


class TestPineconeVectorStore:
    def test_sets_auth_headers(self, pinecone: PineconeVectorStore, session: MagicMock) -> None:
        assert session.headers["Api-Key"] == "pc-key"
        assert session.headers["Content-Type"] == "application/json"

    def test_upsert_request_shape(self, pinecone: PineconeVectorStore, session: MagicMock) -> None:
        session.post.return_value = _response(body={"upsertedCount": 1})

        ok = pinecone.upsert("doc_chunk_0", [0.1, 0.2], {"docName": "doc"}, "hr")

        assert ok is True
        args, kwargs = session.post.call_args
        assert args[0] == f"{HOST}/vectors/upsert"
        assert kwargs["json"] == {
            "vectors": [{"id": "doc_chunk_0", "values": [0.1, 0.2], "metadata": {"docName": "doc"}}],
            "namespace": "hr",
        }
        assert kwargs["timeout"] == 7

    def test_upsert_accepts_any_2xx(self, pinecone: PineconeVectorStore, session: MagicMock) -> None:
        session.post.return_value = _response(status=202)
        assert pinecone.upsert("a", [1.0], {}, "ns") is True

    def test_upsert_non_success_returns_false(self, pinecone: PineconeVectorStore, session: MagicMock) -> None:
        session.post.return_value = _response(status=400, text="bad dimension")
        assert pinecone.upsert("a", [1.0], {}, "ns") is False

    def test_upsert_network_error_returns_false(self, pinecone: PineconeVectorStore, session: MagicMock) -> None:
        session.post.side_effect = requests.Timeout("slow")
        assert pinecone.upsert("a", [1.0], {}, "ns") is False

    def test_query_request_and_ranking(self, pinecone: PineconeVectorStore, session: MagicMock) -> None:
        session.post.return_value = _response(
            body={
                "namespace": "hr",
                "matches": [
                    {"id": "b", "score": 0.5, "metadata": {"text": "second"}},
                    {"id": "a", "score": 0.9, "metadata": {"text": "first"}},
                ],
            }
        )

        result = pinecone.query([0.1], top_k=2, namespace="hr")

        args, kwargs = session.post.call_args
        assert args[0] == f"{HOST}/query"
        assert kwargs["json"] == {"vector": [0.1], "topK": 2, "namespace": "hr", "includeMetadata": True}
        assert isinstance(result, QueryResult)
        assert [m.id for m in result.matches] == ["a", "b"]
        assert result.texts() == ["first", "second"]
        assert result.namespace == "hr"

    def test_query_without_metadata(self, pinecone: PineconeVectorStore, session: MagicMock) -> None:
        session.post.return_value = _response(body={"matches": [{"id": "a", "score": 0.3}]})
        result = pinecone.query([0.1], namespace="x", include_metadata=False)
        assert session.post.call_args.kwargs["json"]["includeMetadata"] is False
        assert result is not None
        assert result.matches[0].metadata == {}
        assert result.namespace == "x"

    def test_query_empty_result_is_not_failure(self, pinecone: PineconeVectorStore, session: MagicMock) -> None:
        session.post.return_value = _response(body={"matches": []})
        result = pinecone.query([0.1])
        assert result is not None
        assert result.matches == []

    def test_query_failure_returns_none(self, pinecone: PineconeVectorStore, session: MagicMock) -> None:
        session.post.return_value = _response(status=503)
        assert pinecone.query([0.1]) is None

    def test_query_malformed_returns_none(self, pinecone: PineconeVectorStore, session: MagicMock) -> None:
        session.post.return_value = _response(body={"matches": [{"score": 0.1}]})
        assert pinecone.query([0.1]) is None

    def test_describe_index(self, pinecone: PineconeVectorStore, session: MagicMock) -> None:
        stats = {"dimension": 768, "totalVectorCount": 12}
        session.post.return_value = _response(body=stats)

        assert pinecone.describe_index() == stats
        args, kwargs = session.post.call_args
        assert args[0] == f"{HOST}/describe_index_stats"
        assert kwargs["json"] == {}
        assert pinecone.health_check() is True

    def test_describe_index_failure(self, pinecone: PineconeVectorStore, session: MagicMock) -> None:
        session.post.return_value = _response(status=401, text="unauthorized")
        assert pinecone.describe_index() is None
        assert pinecone.health_check() is False


# ── Chroma ──────────────────────────────────────────────────────────────


class TestChromaVectorStore:
    @pytest.fixture(autouse=True)
    def _skip_if_chroma_broken(self) -> None:
        """Skip if chromadb can't be imported (pydantic v1/v2 conflict)."""
        try:
            from doc_embedder.retrieval.chroma_store import ChromaVectorStore  # noqa: F401
        except Exception:
            pytest.skip("chromadb not importable in this environment")

    @pytest.fixture()
    def client(self) -> MagicMock:
        return MagicMock()

    @pytest.fixture()
    def store(self, client: MagicMock):  # noqa: ANN201
        from doc_embedder.retrieval.chroma_store import ChromaVectorStore

        return ChromaVectorStore(collection_prefix="t_", client=client)

    def test_upsert_uses_namespace_collection(self, store, client: MagicMock) -> None:  # noqa: ANN001
        collection = client.get_or_create_collection.return_value

        assert store.upsert("doc_chunk_0", [0.1], {"text": "hello", "chunkIndex": 0}, "hr") is True

        client.get_or_create_collection.assert_called_once_with("t_hr")
        kwargs = collection.upsert.call_args.kwargs
        assert kwargs["ids"] == ["doc_chunk_0"]
        assert kwargs["embeddings"] == [[0.1]]
        assert kwargs["documents"] == ["hello"]

    def test_collections_are_cached_per_namespace(self, store, client: MagicMock) -> None:  # noqa: ANN001
        store.upsert("a", [0.1], {}, "hr")
        store.upsert("b", [0.1], {}, "hr")
        store.upsert("c", [0.1], {}, "eng")
        assert client.get_or_create_collection.call_count == 2

    def test_upsert_error_returns_false(self, store, client: MagicMock) -> None:  # noqa: ANN001
        client.get_or_create_collection.return_value.upsert.side_effect = RuntimeError("dimension mismatch")
        assert store.upsert("a", [0.1], {}, "hr") is False

    def test_query_converts_distances(self, store, client: MagicMock) -> None:  # noqa: ANN001
        client.get_or_create_collection.return_value.query.return_value = {
            "ids": [["near", "far"]],
            "distances": [[0.0, 1.0]],
            "metadatas": [[{"text": "n"}, {"text": "f"}]],
        }

        result = store.query([0.1], top_k=2, namespace="hr")

        assert result is not None
        assert [m.id for m in result.matches] == ["near", "far"]
        assert result.matches[0].score == pytest.approx(1.0)
        assert result.matches[1].score == pytest.approx(0.5)
        assert result.matches[0].text == "n"

    def test_query_error_returns_none(self, store, client: MagicMock) -> None:  # noqa: ANN001
        client.get_or_create_collection.return_value.query.side_effect = RuntimeError("down")
        assert store.query([0.1]) is None

    def test_describe_index(self, store, client: MagicMock) -> None:  # noqa: ANN001
        client.heartbeat.return_value = 123
        client.list_collections.return_value = [MagicMock(name="x"), "t_hr", "other"]
        client.list_collections.return_value[0].name = "t_eng"

        stats = store.describe_index()

        assert stats == {"heartbeat": 123, "namespaces": ["eng", "hr"]}

    def test_describe_index_unreachable(self, store, client: MagicMock) -> None:  # noqa: ANN001
        client.heartbeat.side_effect = ConnectionError("refused")
        assert store.describe_index() is None
        assert store.health_check() is False


# ── check_connection / factory ──────────────────────────────────────────


class TestCheckConnection:
    def test_reachable(self, fake_store) -> None:  # noqa: ANN001
        assert check_connection(fake_store) is True

    def test_unreachable(self, fake_store) -> None:  # noqa: ANN001
        fake_store.reachable = False
        assert check_connection(fake_store) is False


class TestGetVectorStore:
    def test_pinecone(self) -> None:
        store = get_vector_store(Settings(vector_store="pinecone", pinecone_host=HOST, pinecone_api_key="k"))
        assert isinstance(store, PineconeVectorStore)

    def test_chroma(self) -> None:
        fake_chromadb = MagicMock()
        with patch.dict("sys.modules", {"chromadb": fake_chromadb}):
            with patch("doc_embedder.retrieval.chroma_store.chromadb", fake_chromadb, create=True):
                store = get_vector_store(Settings(vector_store="chroma", chroma_host="db", chroma_port=9000))
        fake_chromadb.HttpClient.assert_called_once_with(host="db", port=9000)
        assert type(store).__name__ == "ChromaVectorStore"

    def test_unknown_backend_raises(self) -> None:
        with pytest.raises(ValueError, match="Unsupported vector_store"):
            get_vector_store(Settings(vector_store="faiss"))
