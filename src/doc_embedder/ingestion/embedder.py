"""Embedding clients — one text in, one dense vector (or ``None``) out.

Adding a new provider only requires subclassing
:class:`EmbeddingClientBase` and implementing :meth:`~EmbeddingClientBase.embed`.
Clients never raise for transport or provider faults; ``None`` means
"no embedding obtained" and is distinct from an empty vector.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import requests

if TYPE_CHECKING:
    from doc_embedder.config import Settings

logger = logging.getLogger(__name__)


class EmbeddingClientBase(ABC):
    """Provider-agnostic single-text embedding interface."""

    @abstractmethod
    def embed(self, text: str) -> list[float] | None:
        """Return the embedding of *text*, or ``None`` on failure."""
        ...


class GeminiEmbeddingClient(EmbeddingClientBase):
    """Google Generative Language ``embedContent`` client.

    Parameters
    ----------
    api_key:
        API key sent as the ``key`` query parameter.
    model:
        Embedding model name, e.g. ``"text-embedding-004"``.
    base_url:
        API root up to and including the version segment.
    timeout:
        Per-request timeout in seconds.
    session:
        Optional pre-configured ``requests.Session``.
    """

    def __init__(
        self,
        api_key: str,
        *,
        model: str = "text-embedding-004",
        base_url: str = "https://generativelanguage.googleapis.com/v1",
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self._api_key = api_key
        self.model = model
        self._url = f"{base_url.rstrip('/')}/models/{model}:embedContent"
        self._timeout = timeout
        self._session = session if session is not None else requests.Session()

    def embed(self, text: str) -> list[float] | None:
        payload = {"content": {"parts": [{"text": text}]}}
        try:
            resp = self._session.post(
                self._url,
                params={"key": self._api_key},
                json=payload,
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            logger.error("Error getting embedding: %s", exc)
            return None

        if not 200 <= resp.status_code < 300:
            logger.error("Gemini API error: %d: %s", resp.status_code, resp.text[:500])
            return None

        try:
            values = resp.json()["embedding"]["values"]
            if not isinstance(values, list):
                raise TypeError(f"'values' is {type(values).__name__}")
            return [float(v) for v in values]
        except (ValueError, KeyError, TypeError) as exc:
            logger.error("Malformed Gemini embedding response: %s", exc)
            return None


class HuggingFaceEmbeddingClient(EmbeddingClientBase):
    """Local sentence-transformer embeddings via ``langchain_huggingface``.

    The model is loaded lazily on the first :meth:`embed` call.
    """

    def __init__(self, model_name: str = "sentence-transformers/all-MiniLM-L6-v2") -> None:
        self.model_name = model_name
        self._embedder: Any = None

    def _get_embedder(self) -> Any:
        if self._embedder is None:
            from langchain_huggingface import HuggingFaceEmbeddings

            self._embedder = HuggingFaceEmbeddings(model_name=self.model_name)
        return self._embedder

    def embed(self, text: str) -> list[float] | None:
        try:
            return list(self._get_embedder().embed_query(text))
        except Exception:
            logger.error("HuggingFace embedding failed for model %s", self.model_name, exc_info=True)
            return None


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def get_embedding_client(config: Settings | None = None) -> EmbeddingClientBase:
    """Return the embedding client selected by ``config.embedding_provider``."""
    if config is None:
        from doc_embedder.config import settings as config

    provider = config.embedding_provider.lower()
    if provider == "gemini":
        return GeminiEmbeddingClient(
            config.gemini_api_key,
            model=config.gemini_embedding_model,
            base_url=config.gemini_base_url,
            timeout=config.request_timeout,
        )
    if provider == "huggingface":
        return HuggingFaceEmbeddingClient(config.embedding_model)
    raise ValueError(
        f"Unsupported embedding_provider={config.embedding_provider!r}. "
        "Choose from: gemini, huggingface."
    )
