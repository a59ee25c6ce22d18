"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # Embedding provider
    embedding_provider: str = Field(default="gemini", description="'gemini' or 'huggingface'")
    gemini_api_key: str = Field(default="", description="Google Generative Language API key")
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1"
    gemini_embedding_model: str = "text-embedding-004"
    embedding_model: str = Field(
        default="sentence-transformers/all-MiniLM-L6-v2",
        description="HuggingFace model id used when embedding_provider='huggingface'",
    )

    # Vector store
    vector_store: str = Field(default="pinecone", description="'pinecone' or 'chroma'")
    pinecone_api_key: str = ""
    pinecone_host: str = Field(
        default="",
        description="Index host URL, e.g. 'https://my-index-abc123.svc.us-east1-gcp.pinecone.io'",
    )
    chroma_host: str = "localhost"
    chroma_port: int = 8000
    chroma_collection_prefix: str = "doc_embedder_"

    # HTTP
    request_timeout: float = 30.0

    # Pacing
    passage_delay_seconds: float = 2.0
    document_delay_seconds: float = 3.0

    # Defaults for callers
    default_namespace: str = "default"
    default_top_k: int = 5

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Singleton: import `settings` wherever needed.
settings = Settings()
