"""Data models for header-to-schema mapping."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Fixed confidences for the deterministic strategies
EXACT_CONFIDENCE = 1.0
ALIAS_CONFIDENCE = 0.95


class EntityKind(str, Enum):
    """Record kinds a sheet can represent."""

    CLIENT = "client"
    WORKER = "worker"
    TASK = "task"


# Tie-break order used by the classifier
ENTITY_PRIORITY: tuple[EntityKind, ...] = (
    EntityKind.CLIENT,
    EntityKind.WORKER,
    EntityKind.TASK,
)


class MatchMethod(str, Enum):
    """Strategy that produced a match candidate."""

    EXACT = "exact"
    ALIAS = "alias"
    FUZZY = "fuzzy"
    SEMANTIC = "semantic"  # Embedding cosine similarity
    SEMANTIC_FALLBACK = "semantic_fallback"  # Keyword overlap


class ClassifierMethod(str, Enum):
    """How the entity kind was decided."""

    KEYWORD = "keyword"
    SEMANTIC = "semantic"


class CanonicalField(BaseModel):
    """One named, typed slot in an entity schema."""

    model_config = ConfigDict(frozen=True)

    name: str
    data_type: str  # string, number, array, json
    description: str = ""
    aliases: tuple[str, ...] = ()
    examples: tuple[str, ...] = ()

    def composite_text(self) -> str:
        """Name, aliases, description and examples joined into one text."""
        parts = [self.name, *self.aliases, self.description, *self.examples]
        return " ".join(part for part in parts if part.strip())


class EntitySchema(BaseModel):
    """Canonical fields of one entity kind."""

    model_config = ConfigDict(frozen=True)

    kind: EntityKind
    fields: tuple[CanonicalField, ...]

    def field_names(self) -> list[str]:
        return [field.name for field in self.fields]

    def get_field(self, name: str) -> Optional[CanonicalField]:
        for field in self.fields:
            if field.name == name:
                return field
        return None

    def head(self, count: int) -> "EntitySchema":
        """Reduced schema holding only the first ``count`` fields."""
        return EntitySchema(kind=self.kind, fields=self.fields[:count])


class MatchCandidate(BaseModel):
    """Best field candidate for one raw header."""

    field_name: str
    confidence: float = Field(ge=0.0, le=1.0)
    method: MatchMethod
    original_header: str
    suggested_transformation: Optional[str] = None


class ClassifierDecision(BaseModel):
    """Entity kind chosen for a header set."""

    entity_kind: EntityKind
    confidence: float = Field(ge=0.0, le=1.0)
    method: ClassifierMethod


class MappingResult(BaseModel):
    """Outcome of mapping a header set onto one schema."""

    entity_kind: EntityKind
    mappings: dict[str, MatchCandidate] = Field(default_factory=dict)
    unmapped: list[str] = Field(default_factory=list)
    overall_confidence: float = 0.0
    classification: Optional[ClassifierDecision] = None  # None when the caller chose the kind

    def renames(self) -> dict[str, str]:
        """Raw header -> canonical field name, for the row transform step."""
        return {header: candidate.field_name for header, candidate in self.mappings.items()}

    def duplicate_targets(self) -> dict[str, list[str]]:
        """Fields claimed by more than one header."""
        claimed: dict[str, list[str]] = {}
        for header, candidate in self.mappings.items():
            claimed.setdefault(candidate.field_name, []).append(header)
        return {field: headers for field, headers in claimed.items() if len(headers) > 1}


class UnknownEntityKindError(KeyError):
    """Raised when a schema is requested for a kind that does not exist."""

    pass
