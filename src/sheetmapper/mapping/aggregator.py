"""Maps a full header set onto one schema."""

import asyncio
import logging
from typing import Optional

from ..config import Settings, settings as default_settings
from .matcher import CandidateMatcher
from .models import EntitySchema, MappingResult, MatchCandidate

logger = logging.getLogger(__name__)


class MappingAggregator:
    """Runs the candidate matcher over every header and assembles the result."""

    def __init__(self, matcher: CandidateMatcher, settings: Optional[Settings] = None):
        self.matcher = matcher
        self.settings = settings or default_settings

    async def map_headers(self, headers: list[str], schema: EntitySchema) -> MappingResult:
        """
        Map headers onto a schema.

        Headers are matched independently and concurrently, in batches of
        ``batch_size``. Two headers may resolve to the same field; flagging
        that is left to downstream validation.

        Args:
            headers: Raw header strings
            schema: Target schema

        Returns:
            MappingResult with mapped and unmapped headers in input order
        """
        distinct = list(dict.fromkeys(headers))
        if not distinct:
            return MappingResult(entity_kind=schema.kind)

        try:
            await self.matcher.precompute_field_embeddings(schema)
        except Exception:
            logger.exception(f"Could not precompute field embeddings for {schema.kind.value}")

        matches: dict[str, Optional[MatchCandidate]] = {}
        batch_size = max(1, self.settings.batch_size)
        for start in range(0, len(distinct), batch_size):
            batch = distinct[start : start + batch_size]
            results = await asyncio.gather(*(self._match_one(header, schema) for header in batch))
            matches.update(zip(batch, results))

        mappings = {header: match for header, match in matches.items() if match is not None}
        unmapped = [header for header, match in matches.items() if match is None]
        overall = (
            sum(match.confidence for match in mappings.values()) / len(mappings)
            if mappings
            else 0.0
        )

        logger.info(
            f"Mapped {len(mappings)}/{len(distinct)} headers to {schema.kind.value} "
            f"(confidence {overall:.2f})"
        )
        if unmapped:
            logger.debug(f"Unmapped headers: {unmapped}")

        return MappingResult(
            entity_kind=schema.kind,
            mappings=mappings,
            unmapped=unmapped,
            overall_confidence=overall,
        )

    async def _match_one(self, header: str, schema: EntitySchema) -> Optional[MatchCandidate]:
        try:
            return await self.matcher.best_match(header, schema)
        except Exception:
            logger.exception(f"Matching failed for header '{header}'")
            return None
