from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from ..assemble import to_graph
from ..deps import get_tree_cache
from ..http_errors import http_errors
from ..layout import LayoutMode, layout_tree
from ..nin import clean_nin_input
from ..serialize import tree_to_public
from ..tree_cache import TreeCache
from .people import PersonIn

router = APIRouter(prefix="/trees", tags=["trees"])


@router.get("/by-nin/{nin}")
def get_tree_by_nin(nin: str, cache: TreeCache = Depends(get_tree_cache)) -> dict[str, Any]:
    """Tree for the person holding ``nin`` (non-digits are ignored)."""

    with http_errors():
        tree = cache.find_by_nin(clean_nin_input(nin))
    return tree_to_public(tree)


@router.get("/{principal_id}")
def get_tree(principal_id: str, cache: TreeCache = Depends(get_tree_cache)) -> dict[str, Any]:
    with http_errors():
        tree = cache.get_or_build(principal_id)
    return tree_to_public(tree)


@router.post("/{principal_id}/rebuild")
def rebuild_tree(principal_id: str, cache: TreeCache = Depends(get_tree_cache)) -> dict[str, Any]:
    """Drop the stored snapshot and rebuild it from the current registry."""

    with http_errors():
        tree = cache.rebuild(principal_id)
    return tree_to_public(tree)


@router.put("/{principal_id}/members/{person_id}")
def merge_tree_member(
    principal_id: str,
    person_id: str,
    body: PersonIn,
    cache: TreeCache = Depends(get_tree_cache),
) -> dict[str, Any]:
    """Merge an edited (or newly linked) ancestor into the stored tree only.

    The registry itself is not written here; use ``PUT /people/{id}`` for that.
    """

    with http_errors():
        tree = cache.get_or_build(principal_id)
        tree = cache.update(tree, body.to_person(person_id))
    return tree_to_public(tree)


@router.get("/{principal_id}/graph")
def get_tree_graph(principal_id: str, cache: TreeCache = Depends(get_tree_cache)) -> dict[str, Any]:
    with http_errors():
        tree = cache.get_or_build(principal_id)
    return to_graph(tree).to_dict()


@router.get("/{principal_id}/layout")
def get_tree_layout(
    principal_id: str,
    mode: LayoutMode = Query(default=LayoutMode.GENERATIONAL),
    width: float = Query(default=1200.0, gt=0, le=20_000),
    height: float = Query(default=800.0, gt=0, le=20_000),
    cache: TreeCache = Depends(get_tree_cache),
) -> dict[str, Any]:
    """Positioned nodes for rendering.

    ``layout`` in the response says which layout was used; a hierarchical
    request falls back to generational bands when the tree has no single root.
    """

    with http_errors():
        tree = cache.get_or_build(principal_id)
    result = layout_tree(to_graph(tree), width, height, mode)
    out = result.to_dict()
    out["requested"] = mode.value
    out["width"] = width
    out["height"] = height
    return out
