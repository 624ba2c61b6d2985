from __future__ import annotations

from typing import Any

from .models import AncestryTree, Person, TreeMember
from .nin import format_nin


def person_to_public(p: Person) -> dict[str, Any]:
    out = p.to_dict()
    out["display_name"] = p.display_name
    out["nin_display"] = format_nin(p.nin)
    return out


def member_to_public(m: TreeMember) -> dict[str, Any]:
    out = person_to_public(m.person)
    out["generation"] = m.generation
    out["relation"] = m.relation.value
    return out


def tree_to_public(tree: AncestryTree) -> dict[str, Any]:
    return {
        "principal": member_to_public(tree.principal),
        "members": [member_to_public(m) for m in tree.members],
        "total": len(tree.members),
    }
