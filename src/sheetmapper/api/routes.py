"""API routes for SheetMapper."""

from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from ..mapping import (
    ClassifierDecision,
    EntityKind,
    MappingResult,
    UnknownEntityKindError,
    all_schemas,
    get_schema,
)

router = APIRouter()


def get_manager():
    """Get the global mapping manager instance."""
    from .app import get_manager as _get_manager

    return _get_manager()


class ClassifyRequest(BaseModel):
    """Request to classify a header row."""

    headers: list[str]


class MapRequest(BaseModel):
    """Request to map a header row."""

    headers: list[str]
    entity_kind: Optional[str] = None  # Skip classification when provided


class SuggestionsRequest(BaseModel):
    """Request for hints on unmapped headers."""

    unmapped: list[str]
    entity_kind: str


class SuggestionsResponse(BaseModel):
    """Hints for unmapped headers."""

    suggestions: list[str] = Field(default_factory=list)


def _parse_kind(value: str) -> EntityKind:
    try:
        return EntityKind(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown entity kind: {value}")


# Schema endpoints


@router.get("/schemas")
async def list_schemas():
    """List all canonical schemas."""
    return {"schemas": [schema.model_dump(mode="json") for schema in all_schemas()]}


@router.get("/schemas/{kind}")
async def get_schema_for_kind(kind: str):
    """Get the canonical schema for one entity kind."""
    try:
        schema = get_schema(kind)
    except UnknownEntityKindError:
        raise HTTPException(status_code=404, detail=f"Unknown entity kind: {kind}")
    return schema.model_dump(mode="json")


# Mapping endpoints


@router.post("/classify", response_model=ClassifierDecision)
async def classify_headers(request: ClassifyRequest):
    """Detect which entity kind a header row describes."""
    manager = get_manager()
    return await manager.classify(request.headers)


@router.post("/map", response_model=MappingResult)
async def map_headers(request: MapRequest):
    """Map a header row onto its canonical schema."""
    manager = get_manager()
    entity_kind = _parse_kind(request.entity_kind) if request.entity_kind else None
    return await manager.map_sheet(request.headers, entity_kind)


@router.post("/suggestions", response_model=SuggestionsResponse)
async def suggest_mappings(request: SuggestionsRequest):
    """Suggest fields for headers that could not be mapped."""
    manager = get_manager()
    entity_kind = _parse_kind(request.entity_kind)
    return SuggestionsResponse(suggestions=manager.suggest_mappings(request.unmapped, entity_kind))


# Diagnostics


@router.get("/stats")
async def get_stats():
    """Cache and embedding statistics."""
    manager = get_manager()
    return {"status": "ok", **manager.stats()}


@router.post("/cache/clear")
async def clear_cache():
    """Clear the similarity cache."""
    manager = get_manager()
    manager.clear_cache()
    return {"status": "ok", "message": "Cache cleared"}


@router.get("/health")
async def health_check():
    """Health check endpoint with diagnostics."""
    from ..config import settings

    # Gather non-secret diagnostics
    config = {
        "embedding_provider": settings.embedding_provider,
        "embedding_model": settings.huggingface_model,
        "huggingface_key_present": bool(settings.huggingface_api_key),
        "cache_capacity": settings.cache_capacity,
    }

    return {
        "status": "ok",
        "service": "sheetmapper",
        "config": config,
    }
