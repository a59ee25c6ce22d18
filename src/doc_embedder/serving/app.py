"""FastAPI application exposing ingestion, search and health checks."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Union

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field, PositiveInt

from doc_embedder.ingestion.models import IngestionSettings, IngestionStats
from doc_embedder.ingestion.pipeline import DocumentIngestor
from doc_embedder.retrieval.base import VectorStoreBase
from doc_embedder.retrieval.models import QueryMatch
from doc_embedder.retrieval.retriever import SemanticRetriever

app = FastAPI(
    title="Document Embedder API",
    version="0.1.0",
    description="Chunk, embed and index documents; run semantic search over the index.",
)


# ── Dependencies (overridable in tests) ───────────────────────────────
@lru_cache(maxsize=1)
def get_store() -> VectorStoreBase:
    from doc_embedder.retrieval.base import get_vector_store

    return get_vector_store()


def get_ingestor(store: VectorStoreBase = Depends(get_store)) -> DocumentIngestor:
    return DocumentIngestor(store=store)


def get_retriever(store: VectorStoreBase = Depends(get_store)) -> SemanticRetriever:
    return SemanticRetriever(store=store)


# ── Request / Response schemas ────────────────────────────────────────
class IngestRequest(BaseModel):
    """Documents to ingest plus per-run options."""

    documents: dict[str, str] | None = None
    chunk_size: Union[Literal["auto"], PositiveInt] = "auto"
    namespace: str = "default"
    isolate_documents: bool = False


class SearchRequest(BaseModel):
    """Free-text similarity query."""

    query: str
    top_k: PositiveInt = 5
    namespace: str = "default"


class SearchResponse(BaseModel):
    """Ranked matches, most similar first."""

    namespace: str
    matches: list[QueryMatch] = Field(default_factory=list)


# ── Routes ────────────────────────────────────────────────────────────
@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}


@app.get("/health/index")
def index_health(store: VectorStoreBase = Depends(get_store)) -> dict[str, str]:
    """Readiness probe: is the vector index reachable?"""
    if not store.health_check():
        raise HTTPException(status_code=503, detail="Vector index unreachable")
    return {"status": "ok"}


@app.post("/ingest", response_model=IngestionStats)
def ingest(request: IngestRequest, ingestor: DocumentIngestor = Depends(get_ingestor)) -> IngestionStats:
    """Run the ingestion pipeline synchronously and return its statistics."""
    settings = IngestionSettings(
        chunk_size=request.chunk_size,
        namespace=request.namespace,
        isolate_documents=request.isolate_documents,
    )
    return ingestor.ingest(request.documents, settings)


@app.post("/search", response_model=SearchResponse)
def search(request: SearchRequest, retriever: SemanticRetriever = Depends(get_retriever)) -> SearchResponse:
    """Embed the query and return the nearest passages."""
    result = retriever.search(request.query, top_k=request.top_k, namespace=request.namespace)
    if result is None:
        raise HTTPException(status_code=502, detail="Query embedding or vector search failed")
    return SearchResponse(namespace=result.namespace or request.namespace, matches=result.matches)
