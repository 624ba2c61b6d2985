"""Generation-banded layout.

Every generation gets a horizontal band, the principal's at the bottom. Known
relations go to fixed slots: parents either side of the principal, the four
grandparents left to right (paternal pair first), and the eight
great-grandparents with each grandparent's two parents side by side. Anything
that does not fit a slot still gets a position, so no node is ever dropped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .layout_config import DEFAULT_LAYOUT, LayoutConfig
from .models import GraphLink, GraphNode, PositionedNode, Relation, Sex, TreeGraph

_GRANDPARENT_ORDER = (
    Relation.PATERNAL_GRANDFATHER,
    Relation.PATERNAL_GRANDMOTHER,
    Relation.MATERNAL_GRANDFATHER,
    Relation.MATERNAL_GRANDMOTHER,
)

_GREAT_GRANDPARENT_ORDER = (
    Relation.GREAT_GRANDFATHER_PATERNAL_PATERNAL,
    Relation.GREAT_GRANDMOTHER_PATERNAL_PATERNAL,
    Relation.GREAT_GRANDFATHER_PATERNAL_MATERNAL,
    Relation.GREAT_GRANDMOTHER_PATERNAL_MATERNAL,
    Relation.GREAT_GRANDFATHER_MATERNAL_PATERNAL,
    Relation.GREAT_GRANDMOTHER_MATERNAL_PATERNAL,
    Relation.GREAT_GRANDFATHER_MATERNAL_MATERNAL,
    Relation.GREAT_GRANDMOTHER_MATERNAL_MATERNAL,
)

_PATERNAL_TOKENS = ("pere", "paternel")
_MATERNAL_TOKENS = ("mere", "maternel")


@dataclass
class GenerationalLayout:
    nodes: list[PositionedNode] = field(default_factory=list)
    links: list[GraphLink] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "links": [link.to_dict() for link in self.links],
        }


def band_positions(generations: list[int], height: float, config: LayoutConfig = DEFAULT_LAYOUT) -> dict[int, float]:
    """Vertical centre of each generation band, oldest generation on top.

    The bands always fill ``band_height_fraction`` of the height, measured up
    from the bottom edge. Deep trees widen the gap between bands relative to
    the half-band margins at either end.
    """

    if not generations:
        return {}
    max_generation = max(max(generations), 0)
    spread = config.band_spread if max_generation >= config.band_spread_min_generation else 1.0
    unit = height * config.band_height_fraction / (spread * max_generation + 1)
    return {g: height - unit * (0.5 + spread * g) for g in sorted(set(generations))}


def _slot_relation(node: GraphNode) -> Optional[Relation]:
    """Relation used for slot lookup, or None when the node has no slot."""

    relation = Relation.parse(node.relation)
    if relation is None and node.generation == 1:
        # Unlabelled parent: place by sex.
        return Relation.FATHER if node.sex is Sex.MALE else Relation.MOTHER
    if relation is None or relation.generation != node.generation:
        return None
    return relation


def _slot_x(relation: Relation, width: float, config: LayoutConfig) -> float:
    center = width / 2
    generation = relation.generation
    if generation == 0:
        return center
    if generation == 1:
        offset = width * config.parent_offset_fraction
        return center - offset if relation is Relation.FATHER else center + offset
    if generation == 2:
        return width * config.grandparent_slots[_GRANDPARENT_ORDER.index(relation)]
    return width * config.great_grandparent_slots[_GREAT_GRANDPARENT_ORDER.index(relation)]


def _fallback_x(node: GraphNode, width: float, config: LayoutConfig) -> float:
    label = (node.relation or "").lower()
    if any(tok in label for tok in _PATERNAL_TOKENS):
        return width * config.fallback_paternal_fraction
    if any(tok in label for tok in _MATERNAL_TOKENS):
        return width * config.fallback_maternal_fraction
    return width / 2


def layout_generational(
    graph: TreeGraph,
    width: float,
    height: float,
    *,
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> GenerationalLayout:
    """Position every node of ``graph`` in generation bands.

    Two nodes claiming the same slot: the later one keeps it, the earlier one is
    placed like any other unslotted node.
    """

    if not graph.nodes:
        return GenerationalLayout(nodes=[], links=list(graph.links))

    bands = band_positions([n.generation for n in graph.nodes], height, config)

    slots: dict[Relation, int] = {}
    for i, node in enumerate(graph.nodes):
        relation = _slot_relation(node)
        if relation is not None:
            slots[relation] = i

    positions: dict[int, tuple[float, float]] = {}
    for relation, i in slots.items():
        node = graph.nodes[i]
        positions[i] = (_slot_x(relation, width, config), bands[node.generation])

    positioned: list[PositionedNode] = []
    for i, node in enumerate(graph.nodes):
        if i in positions:
            x, y = positions[i]
        else:
            x = _fallback_x(node, width, config)
            y = bands.get(node.generation, height / 2)
        positioned.append(PositionedNode(node=node, x=x, y=y))

    return GenerationalLayout(nodes=positioned, links=list(graph.links))
