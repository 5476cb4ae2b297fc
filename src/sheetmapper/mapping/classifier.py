"""Entity kind detection from a sheet's header row."""

import asyncio
import logging
from typing import Optional

from ..config import Settings, settings as default_settings
from .matcher import CandidateMatcher
from .models import ENTITY_PRIORITY, ClassifierDecision, ClassifierMethod, EntityKind
from .registry import get_schema

logger = logging.getLogger(__name__)

ENTITY_KEYWORDS: dict[EntityKind, tuple[str, ...]] = {
    EntityKind.CLIENT: ("client", "customer", "priority", "group", "attributes"),
    EntityKind.WORKER: ("worker", "employee", "skill", "slot", "load", "qualification"),
    EntityKind.TASK: ("task", "job", "duration", "category", "phase", "concurrent"),
}


def _pick(scores: dict[EntityKind, float]) -> EntityKind:
    """Highest score; ties go to the earlier kind in priority order."""
    best = ENTITY_PRIORITY[0]
    for kind in ENTITY_PRIORITY[1:]:
        if scores[kind] > scores[best]:
            best = kind
    return best


class EntityClassifier:
    """Decides which entity kind a header set describes.

    A keyword pass runs first. When it is inconclusive, a sample of the
    headers is run through the candidate matcher against a reduced schema of
    each kind. The result is always one of the known kinds.
    """

    def __init__(self, matcher: CandidateMatcher, settings: Optional[Settings] = None):
        self.matcher = matcher
        self.settings = settings or default_settings

    async def classify(self, headers: list[str]) -> ClassifierDecision:
        """
        Classify a header set.

        Args:
            headers: Raw header strings in sheet order

        Returns:
            ClassifierDecision naming exactly one entity kind
        """
        if not headers:
            return ClassifierDecision(
                entity_kind=ENTITY_PRIORITY[0], confidence=0.0, method=ClassifierMethod.KEYWORD
            )

        try:
            decision = self._keyword_decision(headers)
            if decision is not None:
                return decision
            return await self._semantic_decision(headers)
        except Exception:
            logger.exception("Entity classification failed, defaulting by priority")
            return ClassifierDecision(
                entity_kind=ENTITY_PRIORITY[0], confidence=0.0, method=ClassifierMethod.SEMANTIC
            )

    def keyword_scores(self, headers: list[str]) -> dict[EntityKind, int]:
        """Number of headers containing at least one keyword of each kind."""
        lowered = [header.lower() for header in headers]
        return {
            kind: sum(
                1 for header in lowered if any(keyword in header for keyword in ENTITY_KEYWORDS[kind])
            )
            for kind in ENTITY_PRIORITY
        }

    def _keyword_decision(self, headers: list[str]) -> Optional[ClassifierDecision]:
        scores = self.keyword_scores(headers)
        best = _pick(scores)
        score = scores[best]

        if score < self.settings.classifier_min_keyword_hits:
            logger.debug(f"Keyword pass inconclusive: {scores}")
            return None

        confidence = min(self.settings.classifier_max_keyword_confidence, score / len(headers))
        logger.info(f"Classified headers as {best.value} by keywords ({score}/{len(headers)})")
        return ClassifierDecision(
            entity_kind=best, confidence=confidence, method=ClassifierMethod.KEYWORD
        )

    async def _semantic_decision(self, headers: list[str]) -> ClassifierDecision:
        sample = headers[: self.settings.classifier_sample_size]
        reduced = {
            kind: get_schema(kind).head(self.settings.classifier_field_limit)
            for kind in ENTITY_PRIORITY
        }

        async def score_kind(kind: EntityKind) -> float:
            matches = await asyncio.gather(
                *(self.matcher.best_match(header, reduced[kind]) for header in sample)
            )
            return sum(match.confidence for match in matches if match is not None)

        totals = await asyncio.gather(*(score_kind(kind) for kind in ENTITY_PRIORITY))
        # Unsampled headers count as misses
        scores = {kind: total / len(headers) for kind, total in zip(ENTITY_PRIORITY, totals)}

        best = _pick(scores)
        confidence = min(1.0, scores[best])
        logger.info(f"Classified headers as {best.value} semantically (confidence {confidence:.2f})")
        return ClassifierDecision(
            entity_kind=best, confidence=confidence, method=ClassifierMethod.SEMANTIC
        )
