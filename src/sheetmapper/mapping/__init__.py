"""Header classification and schema mapping module."""

from .models import (
    ALIAS_CONFIDENCE,
    EXACT_CONFIDENCE,
    ENTITY_PRIORITY,
    CanonicalField,
    ClassifierDecision,
    ClassifierMethod,
    EntityKind,
    EntitySchema,
    MappingResult,
    MatchCandidate,
    MatchMethod,
    UnknownEntityKindError,
)
from .registry import all_schemas, get_schema
from .matcher import CandidateMatcher
from .classifier import EntityClassifier
from .aggregator import MappingAggregator
from .manager import MappingManager

__all__ = [
    "ALIAS_CONFIDENCE",
    "EXACT_CONFIDENCE",
    "ENTITY_PRIORITY",
    "CanonicalField",
    "ClassifierDecision",
    "ClassifierMethod",
    "EntityKind",
    "EntitySchema",
    "MappingResult",
    "MatchCandidate",
    "MatchMethod",
    "UnknownEntityKindError",
    "all_schemas",
    "get_schema",
    "CandidateMatcher",
    "EntityClassifier",
    "MappingAggregator",
    "MappingManager",
]
