"""Hugging Face inference API embedding client."""

import logging
from typing import Any, Optional

import httpx

from .base import EmbeddingClient, EmbeddingError

logger = logging.getLogger(__name__)


class HuggingFaceEmbeddingClient(EmbeddingClient):
    """Feature-extraction client for the Hugging Face inference API."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "sentence-transformers/all-MiniLM-L6-v2",
        base_url: str = "https://router.huggingface.co/hf-inference/models",
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/{self.model}/pipeline/feature-extraction"

    async def warm_up(self) -> None:
        if not self.api_key:
            raise EmbeddingError("HUGGING_FACE_API_KEY is not set")
        await super().warm_up()

    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Embed texts via the feature-extraction pipeline."""
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = await self._client.post(
                self.endpoint,
                headers=headers,
                json={"inputs": texts},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise EmbeddingError(f"Embedding request failed: {e}") from e
        except ValueError as e:
            raise EmbeddingError(f"Embedding response is not JSON: {e}") from e

        return self._convert_response(data, len(texts))

    def _convert_response(self, data: Any, expected: int) -> list[list[float]]:
        """Convert the API payload into one flat vector per input."""
        if not isinstance(data, list) or len(data) != expected:
            raise EmbeddingError("Unexpected response format from feature extraction")

        vectors = []
        for item in data:
            if not isinstance(item, list) or not item:
                raise EmbeddingError("Unexpected response format from feature extraction")
            if isinstance(item[0], list):
                # Token-level output, mean-pool it
                vectors.append(self._mean_pool(item))
            else:
                vectors.append([float(value) for value in item])
        return vectors

    @staticmethod
    def _mean_pool(token_vectors: list[list[float]]) -> list[float]:
        width = len(token_vectors[0])
        if any(len(vector) != width for vector in token_vectors):
            raise EmbeddingError("Token vectors have inconsistent widths")
        return [
            sum(vector[i] for vector in token_vectors) / len(token_vectors)
            for i in range(width)
        ]

    async def close(self) -> None:
        await self._client.aclose()
