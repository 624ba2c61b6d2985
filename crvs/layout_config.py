from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LayoutConfig:
    """Presentation tuning for both tree layouts.

    Fractions are relative to the viewport passed to the layout call.
    """

    # Generational layout: vertical bands.
    band_height_fraction: float = 0.85
    band_spread: float = 1.8
    band_spread_min_generation: int = 3

    # Generational layout: horizontal slots.
    parent_offset_fraction: float = 0.15
    grandparent_slots: tuple[float, ...] = (0.125, 0.375, 0.625, 0.875)
    great_grandparent_slots: tuple[float, ...] = (
        0.0625,
        0.1875,
        0.3125,
        0.4375,
        0.5625,
        0.6875,
        0.8125,
        0.9375,
    )
    fallback_paternal_fraction: float = 0.25
    fallback_maternal_fraction: float = 0.75

    # Hierarchical layout.
    node_width: float = 220.0
    node_height: float = 300.0
    sibling_separation: float = 2.5
    cousin_separation: float = 3.5
    fit_fraction: float = 0.90


DEFAULT_LAYOUT = LayoutConfig()
