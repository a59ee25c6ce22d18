"""
Serving — FastAPI application for the document embedder.

Exposes ingestion, semantic search and health probes over HTTP so the
pipeline can run as a standalone container.
"""
