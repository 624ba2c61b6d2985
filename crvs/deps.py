"""FastAPI dependency providers for the registry and tree cache.

Tests swap these out through ``app.dependency_overrides`` or by passing
objects straight to the route functions.
"""

from __future__ import annotations

from fastapi import Depends

from .registry import PersonRegistry, PgPersonRegistry
from .tree_cache import PgTreeStore, TreeCache, TreeStore


def get_registry() -> PersonRegistry:
    return PgPersonRegistry()


def get_tree_store() -> TreeStore:
    return PgTreeStore()


def get_tree_cache(
    registry: PersonRegistry = Depends(get_registry),
    store: TreeStore = Depends(get_tree_store),
) -> TreeCache:
    return TreeCache(registry, store)
