"""Pytest configuration and shared fixtures."""

import pytest

from sheetmapper.cache import SimilarityCache
from sheetmapper.config import Settings
from sheetmapper.embeddings import EmbeddingSession
from sheetmapper.mapping import CandidateMatcher, MappingManager, get_schema


@pytest.fixture
def test_settings() -> Settings:
    """Create settings with test values."""
    return Settings(
        semantic_threshold=0.75,
        fuzzy_threshold=0.8,
        fallback_threshold=0.4,
        cache_capacity=1000,
        embedding_provider="none",
        embedding_init_timeout=0.2,
        embedding_call_timeout=0.2,
        classifier_sample_size=5,
        batch_size=10,
    )


@pytest.fixture
def cache() -> SimilarityCache:
    return SimilarityCache(capacity=1000)


@pytest.fixture
def offline_matcher(test_settings, cache) -> CandidateMatcher:
    """Matcher whose embedding capability is unavailable."""
    session = EmbeddingSession(client=None, cache=cache)
    return CandidateMatcher(session, cache, test_settings)


@pytest.fixture
def offline_manager(test_settings) -> MappingManager:
    """Mapping manager with embeddings disabled."""
    return MappingManager(settings=test_settings, embedding_client=None)


@pytest.fixture
def client_schema():
    return get_schema("client")


@pytest.fixture
def worker_schema():
    return get_schema("worker")


@pytest.fixture
def task_schema():
    return get_schema("task")
