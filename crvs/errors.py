from __future__ import annotations


class RegistryError(Exception):
    """Base class for failures reported by the person registry layer."""


class NotFoundError(RegistryError):
    pass


class ValidationError(RegistryError):
    pass


class LayoutError(Exception):
    """The hierarchical layout cannot root the graph at a single principal."""
