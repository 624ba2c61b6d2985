from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .errors import LayoutError
from .generational import layout_generational
from .hierarchy import HierarchyNode, layout_hierarchical
from .layout_config import DEFAULT_LAYOUT, LayoutConfig
from .models import GraphLink, PositionedNode, TreeGraph

log = logging.getLogger(__name__)


class LayoutMode(str, Enum):
    GENERATIONAL = "generational"
    HIERARCHICAL = "hierarchical"


@dataclass
class LayoutResult:
    mode: LayoutMode
    nodes: list[PositionedNode] = field(default_factory=list)
    links: list[GraphLink] = field(default_factory=list)
    root: Optional[HierarchyNode] = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "layout": self.mode.value,
            "nodes": [n.to_dict() for n in self.nodes],
            "links": [link.to_dict() for link in self.links],
        }
        if self.root is not None:
            out["root"] = self.root.to_dict()
        return out


def layout_tree(
    graph: TreeGraph,
    width: float,
    height: float,
    mode: LayoutMode = LayoutMode.GENERATIONAL,
    *,
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> LayoutResult:
    """Run the requested layout, falling back to generational bands.

    ``LayoutResult.mode`` reports the layout that actually produced the
    positions.
    """

    if mode is LayoutMode.HIERARCHICAL:
        try:
            root = layout_hierarchical(graph, width, height, config=config)
        except LayoutError as e:
            log.warning("Hierarchical layout failed (%s); using generational layout", e)
        else:
            return LayoutResult(
                mode=LayoutMode.HIERARCHICAL,
                nodes=root.positioned(),
                links=list(graph.links),
                root=root,
            )

    generational = layout_generational(graph, width, height, config=config)
    return LayoutResult(mode=LayoutMode.GENERATIONAL, nodes=generational.nodes, links=generational.links)
