"""Candidate matching cascade for a single raw header."""

import logging
from typing import Optional

from ..cache import SimilarityCache, pair_key
from ..config import Settings, settings as default_settings
from ..embeddings import EmbeddingCapability, EmbeddingSession
from .models import (
    ALIAS_CONFIDENCE,
    EXACT_CONFIDENCE,
    CanonicalField,
    EntitySchema,
    MatchCandidate,
    MatchMethod,
)
from .text import (
    cosine_similarity,
    normalize,
    similarity_ratio,
    split_field_name,
    suggest_transformation,
    tokenize,
    word_similarity,
)

logger = logging.getLogger(__name__)

# Fuzzy scores against an alias are worth slightly less than against the name
ALIAS_FUZZY_PENALTY = 0.95

# Keyword-overlap token scores
TOKEN_EXACT_SCORE = 1.0
TOKEN_CONTAINS_SCORE = 0.8
TOKEN_SIMILAR_SCORE = 0.6

COSINE_KEY_PREFIX = "cosine::"
RATIO_KEY_PREFIX = "ratio::"


class CandidateMatcher:
    """
    Resolves one raw header to the best field of a schema.

    The quick branch (exact, alias, fuzzy) always runs. Unless it finds an
    exact match, the semantic branch runs as well: embedding similarity when
    the embedding capability is available, keyword overlap otherwise. The
    higher-confidence candidate of the two wins.
    """

    def __init__(
        self,
        embeddings: EmbeddingSession,
        cache: SimilarityCache,
        settings: Optional[Settings] = None,
    ):
        self.embeddings = embeddings
        self.cache = cache
        self.settings = settings or default_settings

    async def best_match(self, header: str, schema: EntitySchema) -> Optional[MatchCandidate]:
        """
        Find the best field candidate for a header.

        Args:
            header: The raw header text (never modified)
            schema: The schema to match against

        Returns:
            The winning MatchCandidate, or None if no strategy accepted a field
        """
        quick = self.quick_match(header, schema)
        if quick is not None and quick.method == MatchMethod.EXACT:
            return quick

        semantic = await self.semantic_match(header, schema)

        if quick is None:
            return semantic
        if semantic is None:
            return quick
        return quick if quick.confidence >= semantic.confidence else semantic

    def quick_match(self, header: str, schema: EntitySchema) -> Optional[MatchCandidate]:
        """Best exact, alias or fuzzy candidate across the whole schema."""
        normalized = normalize(header)
        if not normalized:
            return None

        best_field: Optional[CanonicalField] = None
        best_score = 0.0
        best_method: Optional[MatchMethod] = None

        for field in schema.fields:
            if normalized == normalize(field.name):
                return self._candidate(header, field, EXACT_CONFIDENCE, MatchMethod.EXACT)

            if any(normalized == normalize(alias) for alias in field.aliases):
                if ALIAS_CONFIDENCE > best_score:
                    best_field, best_score, best_method = field, ALIAS_CONFIDENCE, MatchMethod.ALIAS
                continue

            fuzzy = self._fuzzy_score(normalized, field)
            if fuzzy > self.settings.fuzzy_threshold and fuzzy > best_score:
                best_field, best_score, best_method = field, fuzzy, MatchMethod.FUZZY

        if best_field is None:
            return None
        return self._candidate(header, best_field, best_score, best_method)

    def _fuzzy_score(self, normalized: str, field: CanonicalField) -> float:
        score = similarity_ratio(normalized, normalize(field.name))
        for alias in field.aliases:
            alias_score = similarity_ratio(normalized, normalize(alias)) * ALIAS_FUZZY_PENALTY
            score = max(score, alias_score)
        return score

    async def semantic_match(self, header: str, schema: EntitySchema) -> Optional[MatchCandidate]:
        """Embedding-based candidate, or keyword overlap when embeddings are unavailable."""
        capability = await self.embeddings.get_capability()
        if capability.available:
            return await self._embedding_match(header, schema, capability)
        return self.keyword_match(header, schema)

    async def _embedding_match(
        self,
        header: str,
        schema: EntitySchema,
        capability: EmbeddingCapability,
    ) -> Optional[MatchCandidate]:
        normalized = normalize(header)
        if not normalized:
            return None

        header_vector = await capability.embed(normalized)
        if header_vector is None:
            return None

        best_field: Optional[CanonicalField] = None
        best_similarity = 0.0

        for field in schema.fields:
            field_text = field.composite_text()
            key = COSINE_KEY_PREFIX + pair_key(normalized, field_text)
            similarity = self.cache.get(key)

            if similarity is None:
                field_vector = await capability.embed(field_text)
                if field_vector is None:
                    continue
                try:
                    similarity = cosine_similarity(header_vector, field_vector)
                except ValueError as e:
                    logger.warning(f"Skipping field {field.name}: {e}")
                    continue
                self.cache.put(key, similarity)

            if similarity >= self.settings.semantic_threshold and similarity > best_similarity:
                best_field, best_similarity = field, similarity

        if best_field is None:
            return None
        confidence = min(1.0, max(0.0, best_similarity))
        return self._candidate(header, best_field, confidence, MatchMethod.SEMANTIC)

    def keyword_match(self, header: str, schema: EntitySchema) -> Optional[MatchCandidate]:
        """Keyword-overlap scoring between header tokens and each field's text."""
        header_tokens = tokenize(header)
        if not header_tokens:
            return None

        best_field: Optional[CanonicalField] = None
        best_score = 0.0

        for field in schema.fields:
            field_tokens = tokenize(field.composite_text())
            total = sum(self._token_score(token, field_tokens) for token in header_tokens)
            score = total / len(header_tokens)

            if set(header_tokens) & set(split_field_name(field.name)):
                score *= self.settings.fallback_name_bonus
            score = min(score, self.settings.fallback_cap)

            if score >= self.settings.fallback_threshold and score > best_score:
                best_field, best_score = field, score

        if best_field is None:
            return None
        return self._candidate(header, best_field, best_score, MatchMethod.SEMANTIC_FALLBACK)

    def _token_score(self, token: str, field_tokens: list[str]) -> float:
        best = 0.0
        for field_token in field_tokens:
            if token == field_token:
                return TOKEN_EXACT_SCORE
            if token in field_token or field_token in token:
                best = max(best, TOKEN_CONTAINS_SCORE)
            elif word_similarity(token, field_token) > self.settings.word_similarity_threshold:
                best = max(best, TOKEN_SIMILAR_SCORE)
        return best

    async def precompute_field_embeddings(self, schema: EntitySchema) -> int:
        """
        Warm the cache with every field's composite-text vector.

        Returns:
            Number of fields with a vector available (0 when embeddings are off)
        """
        capability = await self.embeddings.get_capability()
        if not capability.available:
            return 0

        embedded = 0
        for field in schema.fields:
            if await capability.embed(field.composite_text()) is not None:
                embedded += 1
        logger.debug(f"Embedded {embedded}/{len(schema.fields)} fields for {schema.kind.value}")
        return embedded

    def rank_candidates(
        self,
        value: str,
        candidates: list[str],
        limit: int = 3,
    ) -> list[tuple[str, float]]:
        """
        Rank candidate strings by edit-distance similarity to a value.

        Scores are memoized in the shared cache so repeated lookups (e.g. when
        correcting many cells of one column) stay cheap.

        Returns:
            Up to ``limit`` (candidate, score) pairs, best first
        """
        normalized = normalize(value)
        scored = []
        for candidate in candidates:
            other = normalize(candidate)
            key = RATIO_KEY_PREFIX + pair_key(normalized, other)
            score = self.cache.get(key)
            if score is None:
                score = similarity_ratio(normalized, other)
                self.cache.put(key, score)
            scored.append((candidate, score))

        scored.sort(key=lambda item: item[1], reverse=True)
        return scored[:limit]

    @staticmethod
    def _candidate(
        header: str,
        field: CanonicalField,
        confidence: float,
        method: MatchMethod,
    ) -> MatchCandidate:
        return MatchCandidate(
            field_name=field.name,
            confidence=confidence,
            method=method,
            original_header=header,
            suggested_transformation=suggest_transformation(header, field.name),
        )
