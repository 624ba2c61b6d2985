from __future__ import annotations

from datetime import date
from typing import Any, Literal, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from ..deps import get_registry
from ..http_errors import http_errors
from ..models import Person, Role, Sex
from ..people import (
    SearchCriteria,
    add_parent,
    create_person,
    delete_person,
    get_person,
    get_person_by_nin,
    search_people,
    update_person,
)
from ..registry import PersonRegistry
from ..serialize import person_to_public

router = APIRouter(prefix="/people", tags=["people"])


class PersonIn(BaseModel):
    nin: str
    surname: str
    given_name: str
    sex: Literal["M", "F"]
    birth_date: Optional[date] = None
    birth_place: Optional[str] = None
    father_surname: Optional[str] = None
    father_nin: Optional[str] = None
    mother_surname: Optional[str] = None
    mother_nin: Optional[str] = None

    def to_person(self, person_id: str = "") -> Person:
        return Person(
            id=person_id,
            nin=self.nin.strip(),
            surname=self.surname.strip(),
            given_name=self.given_name.strip(),
            sex=Sex(self.sex),
            birth_date=self.birth_date,
            birth_place=(self.birth_place or "").strip() or None,
            father_surname=(self.father_surname or "").strip() or None,
            father_nin=(self.father_nin or "").strip() or None,
            mother_surname=(self.mother_surname or "").strip() or None,
            mother_nin=(self.mother_nin or "").strip() or None,
        )


class ParentIn(PersonIn):
    # Always set from the parent role.
    sex: Optional[Literal["M", "F"]] = None


_PARENT_ROLES = {"father": Role.FATHER, "mother": Role.MOTHER}


@router.get("")
def list_people(
    surname: Optional[str] = Query(default=None, max_length=200),
    given_name: Optional[str] = Query(default=None, max_length=200),
    nin: Optional[str] = Query(default=None, max_length=15),
    father_surname: Optional[str] = Query(default=None, max_length=200),
    mother_surname: Optional[str] = Query(default=None, max_length=200),
    registry: PersonRegistry = Depends(get_registry),
) -> dict[str, Any]:
    """List registry records, optionally filtered (all filters must match)."""

    criteria = SearchCriteria(
        surname=surname,
        given_name=given_name,
        nin=nin,
        father_surname=father_surname,
        mother_surname=mother_surname,
    )
    results = [person_to_public(p) for p in search_people(registry, criteria)]
    return {"results": results, "total": len(results)}


@router.get("/by-nin/{nin}")
def get_person_by_nin_route(nin: str, registry: PersonRegistry = Depends(get_registry)) -> dict[str, Any]:
    with http_errors():
        return person_to_public(get_person_by_nin(registry, nin))


@router.get("/{person_id}")
def get_person_route(person_id: str, registry: PersonRegistry = Depends(get_registry)) -> dict[str, Any]:
    with http_errors():
        return person_to_public(get_person(registry, person_id))


@router.post("", status_code=201)
def create_person_route(body: PersonIn, registry: PersonRegistry = Depends(get_registry)) -> dict[str, Any]:
    with http_errors():
        return person_to_public(create_person(registry, body.to_person()))


@router.put("/{person_id}")
def update_person_route(
    person_id: str,
    body: PersonIn,
    registry: PersonRegistry = Depends(get_registry),
) -> dict[str, Any]:
    with http_errors():
        return person_to_public(update_person(registry, body.to_person(person_id)))


@router.delete("/{person_id}")
def delete_person_route(person_id: str, registry: PersonRegistry = Depends(get_registry)) -> dict[str, Any]:
    with http_errors():
        delete_person(registry, person_id)
    return {"deleted": person_id}


@router.post("/{person_id}/parents/{role}", status_code=201)
def add_parent_route(
    person_id: str,
    role: Literal["father", "mother"],
    body: ParentIn,
    registry: PersonRegistry = Depends(get_registry),
) -> dict[str, Any]:
    """Create the person's father or mother and link it in one step.

    Stored trees are not touched; rebuild them to pick up the new ancestor.
    """

    parent_role = _PARENT_ROLES[role]
    sex = "M" if parent_role is Role.FATHER else "F"
    draft = body.model_copy(update={"sex": sex}).to_person()
    with http_errors():
        parent, child = add_parent(registry, person_id, parent_role, draft)
    return {"parent": person_to_public(parent), "child": person_to_public(child)}
