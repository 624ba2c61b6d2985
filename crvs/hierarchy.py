"""Tidy-tree layout rooted at the principal.

The ancestor graph is turned upside down: the principal becomes the root and
each parent hangs below the child it belongs to. Node placement is the
Buchheim / Walker tidy tree (linear time), with a wider gap between nodes that
do not share a parent. Depth goes on ``y`` and sibling order on ``x``; callers
that want a left-to-right chart swap the two.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator, Optional

from .errors import LayoutError
from .layout_config import DEFAULT_LAYOUT, LayoutConfig
from .models import GraphNode, PositionedNode, TreeGraph


class HierarchyNode:
    def __init__(self, data: GraphNode) -> None:
        self.data = data
        self.parent: Optional[HierarchyNode] = None
        self.children: list[HierarchyNode] = []
        self.depth = 0
        self.x = 0.0
        self.y = 0.0

    def __repr__(self) -> str:
        return f"HierarchyNode({self.data.id!r}, x={self.x:.1f}, y={self.y:.1f})"

    def descendants(self) -> list["HierarchyNode"]:
        """Pre-order list of this node and everything below it."""
        out: list[HierarchyNode] = []
        stack = [self]
        while stack:
            node = stack.pop()
            out.append(node)
            stack.extend(reversed(node.children))
        return out

    def links(self) -> list[tuple["HierarchyNode", "HierarchyNode"]]:
        return [(n.parent, n) for n in self.descendants() if n.parent is not None]

    def positioned(self) -> list[PositionedNode]:
        return [PositionedNode(node=n.data, x=n.x, y=n.y) for n in self.descendants()]

    def to_dict(self) -> dict[str, Any]:
        out = self.data.to_dict()
        out["x"] = self.x
        out["y"] = self.y
        out["depth"] = self.depth
        out["children"] = [c.to_dict() for c in self.children]
        return out


class _WalkNode:
    """Scratch state for one node during the tidy-tree walks."""

    def __init__(self, node: Optional[HierarchyNode], number: int) -> None:
        self.node = node
        self.parent: Optional[_WalkNode] = None
        self.children: list[_WalkNode] = []
        self.number = number
        self.prelim = 0.0
        self.mod = 0.0
        self.change = 0.0
        self.shift = 0.0
        self.thread: Optional[_WalkNode] = None
        self.ancestor: _WalkNode = self
        self.default_ancestor: Optional[_WalkNode] = None


Separation = Callable[[HierarchyNode, HierarchyNode], float]


def _post_order(root: _WalkNode) -> Iterator[_WalkNode]:
    stack = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded:
            yield node
            continue
        stack.append((node, True))
        for child in reversed(node.children):
            stack.append((child, False))


def _pre_order(root: _WalkNode) -> Iterator[_WalkNode]:
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def _next_left(v: _WalkNode) -> Optional[_WalkNode]:
    return v.children[0] if v.children else v.thread


def _next_right(v: _WalkNode) -> Optional[_WalkNode]:
    return v.children[-1] if v.children else v.thread


def _move_subtree(wm: _WalkNode, wp: _WalkNode, shift: float) -> None:
    change = shift / (wp.number - wm.number)
    wp.change -= change
    wp.shift += shift
    wm.change += change
    wp.prelim += shift
    wp.mod += shift


def _execute_shifts(v: _WalkNode) -> None:
    shift = 0.0
    change = 0.0
    for w in reversed(v.children):
        w.prelim += shift
        w.mod += shift
        change += w.change
        shift += w.shift + change


def _next_ancestor(vim: _WalkNode, v: _WalkNode, ancestor: _WalkNode) -> _WalkNode:
    return vim.ancestor if vim.ancestor.parent is v.parent else ancestor


def _apportion(v: _WalkNode, w: Optional[_WalkNode], ancestor: _WalkNode, separation: Separation) -> _WalkNode:
    if w is None:
        return ancestor

    vip: Optional[_WalkNode] = v
    vop: _WalkNode = v
    vim: Optional[_WalkNode] = w
    vom: _WalkNode = v.parent.children[0]
    sip = vip.mod
    sop = vop.mod
    sim = vim.mod
    som = vom.mod

    vim = _next_right(vim)
    vip = _next_left(vip)
    while vim is not None and vip is not None:
        vom = _next_left(vom)
        vop = _next_right(vop)
        vop.ancestor = v
        shift = vim.prelim + sim - vip.prelim - sip + separation(vim.node, vip.node)
        if shift > 0:
            _move_subtree(_next_ancestor(vim, v, ancestor), v, shift)
            sip += shift
            sop += shift
        sim += vim.mod
        sip += vip.mod
        som += vom.mod
        sop += vop.mod
        vim = _next_right(vim)
        vip = _next_left(vip)

    if vim is not None and _next_right(vop) is None:
        vop.thread = vim
        vop.mod += sim - sop
    if vip is not None and _next_left(vom) is None:
        vom.thread = vip
        vom.mod += sip - som
        ancestor = v

    return ancestor


def _first_walk(v: _WalkNode, separation: Separation) -> None:
    siblings = v.parent.children
    w = siblings[v.number - 1] if v.number else None
    if v.children:
        _execute_shifts(v)
        midpoint = (v.children[0].prelim + v.children[-1].prelim) / 2
        if w is not None:
            v.prelim = w.prelim + separation(v.node, w.node)
            v.mod = v.prelim - midpoint
        else:
            v.prelim = midpoint
    elif w is not None:
        v.prelim = w.prelim + separation(v.node, w.node)
    v.parent.default_ancestor = _apportion(v, w, v.parent.default_ancestor or siblings[0], separation)


def tidy_tree(root: HierarchyNode, separation: Separation, dx: float, dy: float) -> HierarchyNode:
    """Assign ``x``/``y`` to every node below ``root``; the root lands on x=0."""

    walk_root = _WalkNode(root, 0)
    stack = [walk_root]
    while stack:
        wn = stack.pop()
        for i, child in enumerate(wn.node.children):
            wc = _WalkNode(child, i)
            wc.parent = wn
            wn.children.append(wc)
            stack.append(wc)

    sentinel = _WalkNode(None, 0)
    sentinel.children = [walk_root]
    walk_root.parent = sentinel

    for wn in _post_order(walk_root):
        _first_walk(wn, separation)
    sentinel.mod = -walk_root.prelim

    for wn in _pre_order(walk_root):
        wn.node.x = (wn.prelim + wn.parent.mod) * dx
        wn.node.y = wn.node.depth * dy
        wn.mod += wn.parent.mod

    return root


def build_hierarchy(graph: TreeGraph) -> HierarchyNode:
    """Invert parent -> child links so the principal is the single root.

    Raises ``LayoutError`` unless exactly one node has generation 0.
    """

    principals = [n for n in graph.nodes if n.generation == 0]
    if len(principals) != 1:
        raise LayoutError(f"principal not found: expected one generation-0 node, got {len(principals)}")

    by_id: dict[str, HierarchyNode] = {}
    for n in graph.nodes:
        by_id.setdefault(n.id, HierarchyNode(n))

    root = by_id.get(principals[0].id)
    if root is None:
        raise LayoutError("root not found after inversion")

    for link in graph.links:
        parent = by_id.get(link.source)
        child = by_id.get(link.target)
        if parent is None or child is None:
            continue
        # Ancestors hang below the person they are an ancestor of.
        if child.data.generation < parent.data.generation:
            if parent is root or parent.parent is not None:
                continue
            parent.parent = child
            child.children.append(parent)

    for node in root.descendants():
        if node.parent is not None:
            node.depth = node.parent.depth + 1

    return root


def _fit(root: HierarchyNode, width: float, height: float, fraction: float) -> None:
    nodes = root.descendants()
    min_x = min(n.x for n in nodes)
    max_x = max(n.x for n in nodes)
    max_y = max(n.y for n in nodes)

    box_w = width * fraction
    box_h = height * fraction
    extent_x = max_x - min_x

    sx = min(1.0, box_w / extent_x) if extent_x > 0 else 1.0
    sy = min(1.0, box_h / max_y) if max_y > 0 else 1.0

    left = (width - extent_x * sx) / 2
    top = (height - box_h) / 2
    for n in nodes:
        n.x = left + (n.x - min_x) * sx
        n.y = top + n.y * sy


def layout_hierarchical(
    graph: TreeGraph,
    width: float,
    height: float,
    *,
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> HierarchyNode:
    """Lay the principal's ancestors out as a tidy tree inside the viewport.

    The result is scaled down (never up) to fit ``fit_fraction`` of the
    viewport and centred horizontally.
    """

    root = build_hierarchy(graph)

    def separation(a: HierarchyNode, b: HierarchyNode) -> float:
        if a.parent is b.parent:
            return config.sibling_separation
        return config.cousin_separation

    tidy_tree(root, separation, config.node_width, config.node_height)
    _fit(root, width, height, config.fit_fraction)
    return root
