"""Domain types: base person records and their per-tree annotations.

A ``Person`` is the registry record and never changes because it appears in a
tree. Tree-relative facts (generation, relation to the principal) live on a
``TreeMember`` that wraps the record, so the same ancestor can be "pere" in one
tree and "grand-pere-paternel" in another.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Any, Optional

MAX_GENERATION = 3


class Sex(str, Enum):
    MALE = "M"
    FEMALE = "F"


class Role(str, Enum):
    """One step up the pedigree: through the father or through the mother."""

    FATHER = "F"
    MOTHER = "M"


class Relation(str, Enum):
    PRINCIPAL = "principal"

    FATHER = "pere"
    MOTHER = "mere"

    PATERNAL_GRANDFATHER = "grand-pere-paternel"
    PATERNAL_GRANDMOTHER = "grand-mere-paternelle"
    MATERNAL_GRANDFATHER = "grand-pere-maternel"
    MATERNAL_GRANDMOTHER = "grand-mere-maternelle"

    # arriere-grand-{pere|mere}-{parent side}-{grandparent}
    GREAT_GRANDFATHER_PATERNAL_PATERNAL = "arriere-grand-pere-paternel-paternel"
    GREAT_GRANDMOTHER_PATERNAL_PATERNAL = "arriere-grand-mere-paternelle-paternelle"
    GREAT_GRANDFATHER_PATERNAL_MATERNAL = "arriere-grand-pere-paternel-maternel"
    GREAT_GRANDMOTHER_PATERNAL_MATERNAL = "arriere-grand-mere-paternelle-maternelle"
    GREAT_GRANDFATHER_MATERNAL_PATERNAL = "arriere-grand-pere-maternel-paternel"
    GREAT_GRANDMOTHER_MATERNAL_PATERNAL = "arriere-grand-mere-maternelle-paternelle"
    GREAT_GRANDFATHER_MATERNAL_MATERNAL = "arriere-grand-pere-maternel-maternel"
    GREAT_GRANDMOTHER_MATERNAL_MATERNAL = "arriere-grand-mere-maternelle-maternelle"

    @property
    def path(self) -> tuple[Role, ...]:
        return _PATH_BY_RELATION[self]

    @property
    def generation(self) -> int:
        return len(self.path)

    @property
    def side(self) -> Optional[Role]:
        """Which of the principal's parents this ancestor descends through."""
        return self.path[0] if self.path else None

    def parent_relation(self, role: Role) -> Optional["Relation"]:
        """Relation of this member's father/mother, or None past the depth limit."""
        return _RELATION_BY_PATH.get(self.path + (role,))

    @classmethod
    def parse(cls, label: str | None) -> Optional["Relation"]:
        if not label:
            return None
        try:
            return cls(label)
        except ValueError:
            return None


_F = Role.FATHER
_M = Role.MOTHER

_PATH_BY_RELATION: dict[Relation, tuple[Role, ...]] = {
    Relation.PRINCIPAL: (),
    Relation.FATHER: (_F,),
    Relation.MOTHER: (_M,),
    Relation.PATERNAL_GRANDFATHER: (_F, _F),
    Relation.PATERNAL_GRANDMOTHER: (_F, _M),
    Relation.MATERNAL_GRANDFATHER: (_M, _F),
    Relation.MATERNAL_GRANDMOTHER: (_M, _M),
    Relation.GREAT_GRANDFATHER_PATERNAL_PATERNAL: (_F, _F, _F),
    Relation.GREAT_GRANDMOTHER_PATERNAL_PATERNAL: (_F, _F, _M),
    Relation.GREAT_GRANDFATHER_PATERNAL_MATERNAL: (_F, _M, _F),
    Relation.GREAT_GRANDMOTHER_PATERNAL_MATERNAL: (_F, _M, _M),
    Relation.GREAT_GRANDFATHER_MATERNAL_PATERNAL: (_M, _F, _F),
    Relation.GREAT_GRANDMOTHER_MATERNAL_PATERNAL: (_M, _F, _M),
    Relation.GREAT_GRANDFATHER_MATERNAL_MATERNAL: (_M, _M, _F),
    Relation.GREAT_GRANDMOTHER_MATERNAL_MATERNAL: (_M, _M, _M),
}

_RELATION_BY_PATH: dict[tuple[Role, ...], Relation] = {p: r for r, p in _PATH_BY_RELATION.items()}


def _date_to_json(d: date | None) -> str | None:
    return d.isoformat() if d is not None else None


def _date_from_json(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


@dataclass(frozen=True)
class Person:
    id: str
    nin: str
    surname: str
    given_name: str
    sex: Sex
    birth_date: Optional[date] = None
    birth_place: Optional[str] = None
    father_surname: Optional[str] = None
    father_nin: Optional[str] = None
    mother_surname: Optional[str] = None
    mother_nin: Optional[str] = None

    @property
    def display_name(self) -> str:
        return f"{self.given_name} {self.surname}".strip()

    def parent_nin(self, role: Role) -> Optional[str]:
        return self.father_nin if role is Role.FATHER else self.mother_nin

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "nin": self.nin,
            "surname": self.surname,
            "given_name": self.given_name,
            "sex": self.sex.value,
            "birth_date": _date_to_json(self.birth_date),
            "birth_place": self.birth_place,
            "father_surname": self.father_surname,
            "father_nin": self.father_nin,
            "mother_surname": self.mother_surname,
            "mother_nin": self.mother_nin,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Person":
        return cls(
            id=str(d["id"]),
            nin=str(d["nin"]),
            surname=d.get("surname") or "",
            given_name=d.get("given_name") or "",
            sex=Sex(d.get("sex") or "M"),
            birth_date=_date_from_json(d.get("birth_date")),
            birth_place=d.get("birth_place") or None,
            father_surname=d.get("father_surname") or None,
            father_nin=d.get("father_nin") or None,
            mother_surname=d.get("mother_surname") or None,
            mother_nin=d.get("mother_nin") or None,
        )


@dataclass(frozen=True)
class TreeMember:
    person: Person
    relation: Relation

    @property
    def id(self) -> str:
        return self.person.id

    @property
    def generation(self) -> int:
        return self.relation.generation

    def with_person(self, person: Person) -> "TreeMember":
        return replace(self, person=person)

    def to_dict(self) -> dict[str, Any]:
        return {
            "person": self.person.to_dict(),
            "generation": self.generation,
            "relation": self.relation.value,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "TreeMember":
        return cls(person=Person.from_dict(d["person"]), relation=Relation(d["relation"]))


@dataclass
class AncestryTree:
    principal: TreeMember
    members: list[TreeMember] = field(default_factory=list)

    @property
    def principal_id(self) -> str:
        return self.principal.id

    def member_by_id(self, person_id: str) -> Optional[TreeMember]:
        for m in self.members:
            if m.id == person_id:
                return m
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "principal": self.principal.to_dict(),
            "members": [m.to_dict() for m in self.members],
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "AncestryTree":
        return cls(
            principal=TreeMember.from_dict(d["principal"]),
            members=[TreeMember.from_dict(m) for m in d.get("members") or []],
        )


class LinkKind(str, Enum):
    PARENT_CHILD = "parent-enfant"
    # Declared for partner links; nothing builds these yet.
    SPOUSE = "conjoint"


@dataclass(frozen=True)
class GraphNode:
    id: str
    nin: str
    surname: str
    given_name: str
    sex: Sex
    generation: int
    relation: str
    father_nin: Optional[str] = None
    mother_nin: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "nin": self.nin,
            "surname": self.surname,
            "given_name": self.given_name,
            "sex": self.sex.value,
            "generation": self.generation,
            "relation": self.relation,
            "father_nin": self.father_nin,
            "mother_nin": self.mother_nin,
        }


@dataclass(frozen=True)
class GraphLink:
    source: str
    target: str
    kind: LinkKind = LinkKind.PARENT_CHILD

    def to_dict(self) -> dict[str, Any]:
        return {"source": self.source, "target": self.target, "type": self.kind.value}


@dataclass
class TreeGraph:
    nodes: list[GraphNode] = field(default_factory=list)
    links: list[GraphLink] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "links": [link.to_dict() for link in self.links],
        }


@dataclass(frozen=True)
class PositionedNode:
    node: GraphNode
    x: float
    y: float

    @property
    def id(self) -> str:
        return self.node.id

    def to_dict(self) -> dict[str, Any]:
        out = self.node.to_dict()
        out["x"] = self.x
        out["y"] = self.y
        return out
