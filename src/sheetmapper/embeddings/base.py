"""Base embedding client interface."""

from abc import ABC, abstractmethod
from enum import Enum


class EmbeddingState(str, Enum):
    """Lifecycle of the embedding capability within one session."""

    NOT_TRIED = "not_tried"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class EmbeddingError(Exception):
    """Raised when an embedding backend fails or returns unusable data."""

    pass


class EmbeddingClient(ABC):
    """Abstract base class for embedding backends."""

    @abstractmethod
    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Return one vector per input text."""
        pass

    async def warm_up(self) -> None:
        """Make sure the backend answers; raise EmbeddingError otherwise."""
        vectors = await self.embed(["header"])
        if not vectors or not vectors[0]:
            raise EmbeddingError("Embedding backend returned an empty vector")

    async def close(self) -> None:
        """Release network resources."""
        pass
