"""Embedding capability module."""

from .base import EmbeddingClient, EmbeddingError, EmbeddingState
from .huggingface_client import HuggingFaceEmbeddingClient
from .capability import (
    EmbeddingCapability,
    RemoteEmbeddingCapability,
    UnavailableEmbeddingCapability,
    EmbeddingSession,
    create_embedding_client,
)

__all__ = [
    "EmbeddingClient",
    "EmbeddingError",
    "EmbeddingState",
    "HuggingFaceEmbeddingClient",
    "EmbeddingCapability",
    "RemoteEmbeddingCapability",
    "UnavailableEmbeddingCapability",
    "EmbeddingSession",
    "create_embedding_client",
]
