"""
Retrieval — vector-store backends and the semantic query path.

Public surface
--------------
- :class:`SemanticRetriever` — embed a query text and search one namespace.
- :class:`VectorStoreBase` — abstract backend (subclass for new providers).
- :class:`PineconeVectorStore` — default Pinecone REST backend.
- :class:`ChromaVectorStore` — Chroma backend, one collection per namespace.
- :class:`QueryMatch`, :class:`QueryResult` — result models.
- :func:`check_connection`, :func:`get_vector_store` — probe and factory.
"""

from doc_embedder.retrieval.base import VectorStoreBase, check_connection, get_vector_store
from doc_embedder.retrieval.models import QueryMatch, QueryResult
from doc_embedder.retrieval.pinecone_store import PineconeVectorStore
from doc_embedder.retrieval.retriever import SemanticRetriever

__all__ = [
    "ChromaVectorStore",
    "PineconeVectorStore",
    "QueryMatch",
    "QueryResult",
    "SemanticRetriever",
    "VectorStoreBase",
    "check_connection",
    "get_vector_store",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import ChromaVectorStore to avoid pulling in chromadb at import time."""
    if name == "ChromaVectorStore":
        from doc_embedder.retrieval.chroma_store import ChromaVectorStore

        return ChromaVectorStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
