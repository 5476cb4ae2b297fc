"""Tests for mapping aggregation and the mapping manager."""

from unittest.mock import AsyncMock

import pytest

from sheetmapper.embeddings import EmbeddingState
from sheetmapper.mapping import (
    ClassifierMethod,
    EntityKind,
    MappingManager,
    MatchMethod,
    UnknownEntityKindError,
)

from tests.fakes import (
    FailingEmbeddingClient,
    FlakyEmbeddingClient,
    KeywordEmbeddingClient,
    SlowEmbeddingClient,
)

CLIENT_HEADERS = ["ClientID", "ClientName", "PriorityLevel", "RequestedTaskIDs", "GroupTag", "AttributesJSON"]


class TestMapSheet:
    """Mapping with embeddings disabled."""

    @pytest.mark.asyncio
    async def test_exact_headers(self, offline_manager):
        result = await offline_manager.map_sheet(CLIENT_HEADERS, "client")

        assert result.entity_kind == EntityKind.CLIENT
        assert result.unmapped == []
        assert result.overall_confidence == 1.0
        assert result.classification is None
        for header in CLIENT_HEADERS:
            assert result.mappings[header].field_name == header
            assert result.mappings[header].method == MatchMethod.EXACT

    @pytest.mark.asyncio
    async def test_classification_attached(self, offline_manager):
        result = await offline_manager.map_sheet(CLIENT_HEADERS)

        assert result.entity_kind == EntityKind.CLIENT
        assert result.classification is not None
        assert result.classification.entity_kind == EntityKind.CLIENT
        assert result.classification.method == ClassifierMethod.KEYWORD

    @pytest.mark.asyncio
    async def test_unmapped_header(self, offline_manager):
        result = await offline_manager.map_sheet(["ClientID", "Qwerty"], EntityKind.CLIENT)

        assert list(result.mappings) == ["ClientID"]
        assert result.unmapped == ["Qwerty"]
        assert result.overall_confidence == 1.0

    @pytest.mark.asyncio
    async def test_every_header_accounted_for(self, offline_manager):
        headers = ["WorkerID", "Qwerty", "Skilz", "Open Time Slots", "Plugh", "team"]

        result = await offline_manager.map_sheet(headers, "worker")

        assert set(result.mappings) | set(result.unmapped) == set(headers)
        assert not set(result.mappings) & set(result.unmapped)
        assert result.unmapped == ["Qwerty", "Plugh"]
        assert list(result.mappings) == ["WorkerID", "Skilz", "Open Time Slots", "team"]

    @pytest.mark.asyncio
    async def test_duplicate_targets_allowed(self, offline_manager):
        result = await offline_manager.map_sheet(["client_id", "customer_id"], "client")

        assert result.mappings["client_id"].field_name == "ClientID"
        assert result.mappings["customer_id"].field_name == "ClientID"
        assert result.duplicate_targets() == {"ClientID": ["client_id", "customer_id"]}
        assert result.overall_confidence == pytest.approx((1.0 + 0.95) / 2)

    @pytest.mark.asyncio
    async def test_renames(self, offline_manager):
        result = await offline_manager.map_sheet(["customer_id", "Qwerty"], "client")

        assert result.renames() == {"customer_id": "ClientID"}

    @pytest.mark.asyncio
    async def test_empty_headers(self, offline_manager):
        result = await offline_manager.map_sheet([], "task")

        assert result.entity_kind == EntityKind.TASK
        assert result.mappings == {}
        assert result.unmapped == []
        assert result.overall_confidence == 0.0

    @pytest.mark.asyncio
    async def test_repeated_header_reported_once(self, offline_manager):
        result = await offline_manager.map_sheet(["Qwerty", "Qwerty", "TaskID"], "task")

        assert result.unmapped == ["Qwerty"]
        assert list(result.mappings) == ["TaskID"]

    @pytest.mark.asyncio
    async def test_unknown_kind_raises(self, offline_manager):
        with pytest.raises(UnknownEntityKindError):
            await offline_manager.map_sheet(["ClientID"], "vendor")

    @pytest.mark.asyncio
    async def test_matcher_failure_leaves_headers_unmapped(self, offline_manager):
        offline_manager.matcher.best_match = AsyncMock(side_effect=RuntimeError("boom"))

        result = await offline_manager.map_sheet(["ClientID", "ClientName"], "client")

        assert result.mappings == {}
        assert result.unmapped == ["ClientID", "ClientName"]
        assert result.overall_confidence == 0.0

    @pytest.mark.asyncio
    async def test_small_batches(self, test_settings):
        manager = MappingManager(
            settings=test_settings.model_copy(update={"batch_size": 2}),
            embedding_client=None,
        )

        result = await manager.map_sheet(CLIENT_HEADERS + ["Qwerty"], "client")

        assert list(result.mappings) == CLIENT_HEADERS
        assert result.unmapped == ["Qwerty"]


class TestSuggestions:
    """Hints for unmapped headers."""

    def test_substring_hint(self, offline_manager):
        suggestions = offline_manager.suggest_mappings(["cust"], "client")

        assert suggestions == ['"cust" might be "ClientID"']

    def test_no_hint_for_unrelated(self, offline_manager):
        assert offline_manager.suggest_mappings(["Qwerty", "   "], "worker") == []

    def test_unknown_kind(self, offline_manager):
        with pytest.raises(UnknownEntityKindError):
            offline_manager.suggest_mappings(["cust"], "vendor")


class TestDegradation:
    """Embedding failures never surface to callers."""

    @pytest.mark.asyncio
    async def test_failed_initialization_is_permanent(self, test_settings):
        client = FailingEmbeddingClient()
        manager = MappingManager(settings=test_settings, embedding_client=client)

        first = await manager.map_sheet(["available_slots", "Open Time Slots"], "worker")
        second = await manager.map_sheet(["Skilz"], "worker")

        assert manager.embeddings.state == EmbeddingState.UNAVAILABLE
        assert client.warm_ups == 1
        assert client.calls == 0
        assert first.mappings["available_slots"].method == MatchMethod.EXACT
        assert first.mappings["Open Time Slots"].method == MatchMethod.SEMANTIC_FALLBACK
        assert second.mappings["Skilz"].method == MatchMethod.FUZZY

    @pytest.mark.asyncio
    async def test_slow_initialization_falls_back(self, test_settings):
        manager = MappingManager(settings=test_settings, embedding_client=SlowEmbeddingClient())

        result = await manager.map_sheet(["Open Time Slots"], "worker")

        assert manager.embeddings.state == EmbeddingState.UNAVAILABLE
        assert result.mappings["Open Time Slots"].method == MatchMethod.SEMANTIC_FALLBACK

    @pytest.mark.asyncio
    async def test_failed_call_keeps_quick_result(self, test_settings):
        client = FlakyEmbeddingClient(vocabulary=["expertise"], failing_texts={"skilz"})
        manager = MappingManager(settings=test_settings, embedding_client=client)

        result = await manager.map_sheet(["Skilz"], "worker")

        assert manager.embeddings.state == EmbeddingState.AVAILABLE
        assert result.mappings["Skilz"].field_name == "Skills"
        assert result.mappings["Skilz"].method == MatchMethod.FUZZY

    @pytest.mark.asyncio
    async def test_semantic_mode(self, test_settings):
        manager = MappingManager(
            settings=test_settings,
            embedding_client=KeywordEmbeddingClient(vocabulary=["expertise"]),
        )
        await manager.initialize()

        result = await manager.map_sheet(["Expertise Areas", "WorkerID"], "worker")

        assert result.mappings["Expertise Areas"].field_name == "Skills"
        assert result.mappings["Expertise Areas"].method == MatchMethod.SEMANTIC
        assert result.mappings["WorkerID"].method == MatchMethod.EXACT
        await manager.close()


class TestStats:
    """Diagnostics and cache control."""

    @pytest.mark.asyncio
    async def test_stats_and_clear(self, offline_manager):
        await offline_manager.initialize()
        offline_manager.matcher.rank_candidates("Pythn", ["Python", "Java"])

        stats = offline_manager.stats()
        assert stats["cache"]["size"] == 2
        assert stats["embeddings"]["state"] == "unavailable"

        offline_manager.clear_cache()
        assert offline_manager.stats()["cache"]["size"] == 0
