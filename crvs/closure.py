from __future__ import annotations

import logging
from typing import Iterable

from .models import MAX_GENERATION, Person, Relation, Role, TreeMember

log = logging.getLogger(__name__)

_ROLES = (Role.FATHER, Role.MOTHER)


def _index_by_nin(all_persons: Iterable[Person]) -> dict[str, Person]:
    # First record wins, like a linear find over the registry list.
    out: dict[str, Person] = {}
    for p in all_persons:
        if p.nin and p.nin not in out:
            out[p.nin] = p
    return out


def build_closure(principal: Person, all_persons: Iterable[Person]) -> list[TreeMember]:
    """Return the principal plus every resolvable ancestor up to great-grandparents.

    Ancestors are found by following ``father_nin`` / ``mother_nin`` against the
    registry snapshot. A reference that does not resolve ends that branch: nothing
    above a missing ancestor is looked up. Each member is annotated with its
    relation to the principal; registry records are never modified.

    Members come out generation by generation (principal, parents, grandparents,
    great-grandparents), paternal side first within a generation.
    """

    root = TreeMember(person=principal, relation=Relation.PRINCIPAL)
    if not principal.father_nin and not principal.mother_nin:
        return [root]

    by_nin = _index_by_nin(all_persons)
    members: list[TreeMember] = [root]
    seen: set[str] = {principal.id}

    frontier = [root]
    for _ in range(MAX_GENERATION):
        next_frontier: list[TreeMember] = []
        for child in frontier:
            for role in _ROLES:
                parent_nin = child.person.parent_nin(role)
                if not parent_nin:
                    continue
                parent = by_nin.get(parent_nin)
                if parent is None:
                    log.debug(
                        "Branch ends at %s: %s nin %s not in registry",
                        child.relation.value,
                        role.name.lower(),
                        parent_nin,
                    )
                    continue
                if parent.id in seen:
                    # Pedigree collapse: keep the closest annotation only.
                    continue
                relation = child.relation.parent_relation(role)
                if relation is None:
                    continue
                member = TreeMember(person=parent, relation=relation)
                seen.add(parent.id)
                members.append(member)
                next_frontier.append(member)
        frontier = next_frontier
        if not frontier:
            break

    return members
