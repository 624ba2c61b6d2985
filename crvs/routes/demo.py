from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from ..deps import get_registry, get_tree_store
from ..registry import PersonRegistry
from ..seed import seed_registry
from ..tree_cache import TreeStore

router = APIRouter()


@router.post("/demo/seed")
def demo_seed(
    registry: PersonRegistry = Depends(get_registry),
    store: TreeStore = Depends(get_tree_store),
) -> dict[str, Any]:
    """Load the sample four-generation family into the registry.

    Stored trees for the sample people are dropped so they are rebuilt from the
    fresh records on next access.
    """

    people = seed_registry(registry)
    for p in people:
        store.delete(p.id)
    return {"loaded": len(people), "principal_id": people[0].id}
