"""Degradable embedding capability and its one-shot initialization."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from ..config import Settings
from ..cache import SimilarityCache
from .base import EmbeddingClient, EmbeddingError, EmbeddingState
from .huggingface_client import HuggingFaceEmbeddingClient

logger = logging.getLogger(__name__)

EMBEDDING_KEY_PREFIX = "embedding::"


class EmbeddingCapability(ABC):
    """Source of semantic vectors for the matcher."""

    available: bool = False

    @abstractmethod
    async def embed(self, text: str) -> Optional[tuple[float, ...]]:
        """Vector for ``text``, or None if it cannot be produced."""
        pass


class UnavailableEmbeddingCapability(EmbeddingCapability):
    """Stand-in used once the backend is known to be unusable."""

    available = False

    def __init__(self, reason: str = ""):
        self.reason = reason

    async def embed(self, text: str) -> Optional[tuple[float, ...]]:
        return None


class RemoteEmbeddingCapability(EmbeddingCapability):
    """Embedding capability backed by an initialized client.

    Vectors are memoized in the shared similarity cache. Each cache miss costs
    one client call bounded by ``call_timeout``; a failed or timed-out call
    yields None for that text only.
    """

    available = True

    def __init__(self, client: EmbeddingClient, cache: SimilarityCache, call_timeout: float):
        self.client = client
        self.cache = cache
        self.call_timeout = call_timeout
        self.calls = 0
        self.failures = 0

    async def embed(self, text: str) -> Optional[tuple[float, ...]]:
        key = EMBEDDING_KEY_PREFIX + text
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        self.calls += 1
        try:
            vectors = await asyncio.wait_for(self.client.embed([text]), timeout=self.call_timeout)
            if not vectors or not vectors[0]:
                raise EmbeddingError("empty vector")
        except asyncio.TimeoutError:
            self.failures += 1
            logger.warning(f"Embedding call timed out after {self.call_timeout}s for '{text}'")
            return None
        except Exception as e:
            self.failures += 1
            logger.warning(f"Embedding call failed for '{text}': {e}")
            return None

        vector = tuple(float(value) for value in vectors[0])
        self.cache.put(key, vector)
        return vector


class EmbeddingSession:
    """Resolves the embedding capability at most once per session.

    States move NOT_TRIED -> AVAILABLE or NOT_TRIED -> UNAVAILABLE and never
    back. Initialization is bounded by ``init_timeout``; a failure, a timeout
    or a missing client all settle on UNAVAILABLE for the rest of the session.
    """

    def __init__(
        self,
        client: Optional[EmbeddingClient],
        cache: SimilarityCache,
        init_timeout: float = 3.0,
        call_timeout: float = 5.0,
    ):
        self.client = client
        self.cache = cache
        self.init_timeout = init_timeout
        self.call_timeout = call_timeout
        self.state = EmbeddingState.NOT_TRIED
        self.init_attempts = 0
        self.last_error: Optional[str] = None
        self._capability: Optional[EmbeddingCapability] = None
        self._lock = asyncio.Lock()

    async def get_capability(self) -> EmbeddingCapability:
        """Return the session's capability, initializing it on first use."""
        if self._capability is not None:
            return self._capability

        async with self._lock:
            if self._capability is None:
                self._capability = await self._initialize()
        return self._capability

    async def _initialize(self) -> EmbeddingCapability:
        if self.client is None:
            self.state = EmbeddingState.UNAVAILABLE
            self.last_error = "no embedding provider configured"
            logger.info("Embedding provider disabled, using keyword matching")
            return UnavailableEmbeddingCapability(reason=self.last_error)

        self.init_attempts += 1
        logger.info("Initializing embedding capability...")
        try:
            await asyncio.wait_for(self.client.warm_up(), timeout=self.init_timeout)
        except asyncio.TimeoutError:
            self.last_error = f"initialization timed out after {self.init_timeout}s"
        except Exception as e:
            self.last_error = str(e) or type(e).__name__
        else:
            self.state = EmbeddingState.AVAILABLE
            logger.info("Embedding capability ready (semantic mode)")
            return RemoteEmbeddingCapability(self.client, self.cache, self.call_timeout)

        self.state = EmbeddingState.UNAVAILABLE
        logger.info(f"Embeddings unavailable ({self.last_error}), using keyword matching")
        return UnavailableEmbeddingCapability(reason=self.last_error)

    def stats(self) -> dict[str, Any]:
        stats: dict[str, Any] = {
            "state": self.state.value,
            "init_attempts": self.init_attempts,
            "last_error": self.last_error,
            "calls": 0,
            "failures": 0,
        }
        if isinstance(self._capability, RemoteEmbeddingCapability):
            stats["calls"] = self._capability.calls
            stats["failures"] = self._capability.failures
        return stats

    async def close(self) -> None:
        if self.client is not None:
            await self.client.close()


def create_embedding_client(settings: Settings) -> Optional[EmbeddingClient]:
    """Build the configured embedding client, or None when disabled."""
    provider = settings.embedding_provider.lower()
    if provider == "none":
        return None
    if provider == "huggingface":
        return HuggingFaceEmbeddingClient(
            api_key=settings.huggingface_api_key,
            model=settings.huggingface_model,
            base_url=settings.huggingface_base_url,
        )
    raise ValueError(f"Unsupported embedding provider: {settings.embedding_provider}")
