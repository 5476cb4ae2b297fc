"""HTTP API for SheetMapper."""

from .app import create_app, get_manager

__all__ = ["create_app", "get_manager"]
