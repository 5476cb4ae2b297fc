"""Main mapping manager for header classification and mapping."""

import logging
from typing import Any, Optional, Union

from ..cache import SimilarityCache
from ..config import Settings, settings as default_settings
from ..embeddings import EmbeddingClient, EmbeddingSession, create_embedding_client
from .aggregator import MappingAggregator
from .classifier import EntityClassifier
from .matcher import CandidateMatcher
from .models import ClassifierDecision, EntityKind, MappingResult
from .registry import get_schema

logger = logging.getLogger(__name__)

_DEFAULT_CLIENT: Any = object()


class MappingManager:
    """
    Entry point for header mapping.

    Owns one similarity cache and one embedding session, shared by the
    classifier and the aggregator for the lifetime of the manager.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        embedding_client: Optional[EmbeddingClient] = _DEFAULT_CLIENT,
    ):
        """
        Initialize the mapping manager.

        Args:
            settings: Optional Settings instance (module settings if not provided)
            embedding_client: Embedding backend; built from settings if omitted,
                pass None to disable embeddings
        """
        self.settings = settings or default_settings
        if embedding_client is _DEFAULT_CLIENT:
            embedding_client = create_embedding_client(self.settings)

        self.cache = SimilarityCache(capacity=self.settings.cache_capacity)
        self.embeddings = EmbeddingSession(
            client=embedding_client,
            cache=self.cache,
            init_timeout=self.settings.embedding_init_timeout,
            call_timeout=self.settings.embedding_call_timeout,
        )
        self.matcher = CandidateMatcher(self.embeddings, self.cache, self.settings)
        self.classifier = EntityClassifier(self.matcher, self.settings)
        self.aggregator = MappingAggregator(self.matcher, self.settings)
        self._initialized = False

    async def initialize(self):
        """Resolve the embedding capability up front."""
        if not self._initialized:
            await self.embeddings.get_capability()
            self._initialized = True
            logger.info(f"MappingManager initialized (embeddings {self.embeddings.state.value})")

    async def close(self):
        """Close the mapping manager and release the embedding client."""
        await self.embeddings.close()
        self._initialized = False

    async def classify(self, headers: list[str]) -> ClassifierDecision:
        return await self.classifier.classify(headers)

    async def map_sheet(
        self,
        headers: list[str],
        entity_kind: Optional[Union[EntityKind, str]] = None,
    ) -> MappingResult:
        """
        Classify (unless the kind is given) and map a header row.

        Args:
            headers: Raw header strings from the parser
            entity_kind: Known entity kind; skips classification when set

        Returns:
            MappingResult, with the classifier decision attached when one was made

        Raises:
            UnknownEntityKindError: If entity_kind is not a known kind
        """
        decision: Optional[ClassifierDecision] = None
        if entity_kind is None:
            decision = await self.classifier.classify(headers)
            schema = get_schema(decision.entity_kind)
        else:
            schema = get_schema(entity_kind)

        result = await self.aggregator.map_headers(headers, schema)
        result.classification = decision
        return result

    def suggest_mappings(
        self,
        unmapped: list[str],
        entity_kind: Union[EntityKind, str],
    ) -> list[str]:
        """
        Hints for headers that could not be mapped.

        A hint is produced when the header text contains, or is contained in,
        a field name or alias.
        """
        schema = get_schema(entity_kind)
        suggestions = []
        for header in unmapped:
            lowered = header.lower().strip()
            if not lowered:
                continue
            for field in schema.fields:
                names = [field.name, *field.aliases]
                if any(lowered in name.lower() or name.lower() in lowered for name in names):
                    suggestions.append(f'"{header}" might be "{field.name}"')
                    break
        return suggestions

    def stats(self) -> dict[str, Any]:
        return {
            "cache": self.cache.stats(),
            "embeddings": self.embeddings.stats(),
        }

    def clear_cache(self) -> None:
        self.cache.clear()
        logger.info("Similarity cache cleared")
