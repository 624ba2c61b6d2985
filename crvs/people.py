from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from typing import Optional

from .errors import NotFoundError, ValidationError
from .models import Person, Role, Sex
from .nin import is_valid_nin
from .registry import PersonRegistry


@dataclass(frozen=True)
class SearchCriteria:
    surname: Optional[str] = None
    given_name: Optional[str] = None
    nin: Optional[str] = None
    father_surname: Optional[str] = None
    mother_surname: Optional[str] = None


def validate_person(person: Person) -> None:
    """Raise ValidationError unless the record's NIN, names and parent NINs are usable."""

    if not is_valid_nin(person.nin):
        raise ValidationError("NIN must be exactly 15 digits")
    if not person.surname.strip() or not person.given_name.strip():
        raise ValidationError("surname and given name are required")
    for label, parent_nin in (("father", person.father_nin), ("mother", person.mother_nin)):
        if parent_nin is None:
            continue
        if not is_valid_nin(parent_nin):
            raise ValidationError(f"{label} NIN must be exactly 15 digits")
        if parent_nin == person.nin:
            raise ValidationError(f"{label} NIN cannot be the person's own NIN")


def get_person(registry: PersonRegistry, person_id: str) -> Person:
    person = registry.find_by_id(person_id)
    if person is None:
        raise NotFoundError(f"person not found: {person_id}")
    return person


def get_person_by_nin(registry: PersonRegistry, nin: str) -> Person:
    if not is_valid_nin(nin):
        raise ValidationError("NIN must be exactly 15 digits")
    person = registry.find_by_nin(nin)
    if person is None:
        raise NotFoundError(f"no person with NIN {nin}")
    return person


def create_person(registry: PersonRegistry, draft: Person) -> Person:
    """Validate and store a new record under a freshly generated id.

    Whatever id ``draft`` carries is ignored.
    """

    validate_person(draft)
    if registry.find_by_nin(draft.nin) is not None:
        raise ValidationError(f"a person with NIN {draft.nin} already exists")
    return registry.save(replace(draft, id=str(uuid.uuid4())))


def update_person(registry: PersonRegistry, person: Person) -> Person:
    get_person(registry, person.id)
    validate_person(person)
    other = registry.find_by_nin(person.nin)
    if other is not None and other.id != person.id:
        raise ValidationError(f"a person with NIN {person.nin} already exists")
    return registry.save(person)


def delete_person(registry: PersonRegistry, person_id: str) -> None:
    get_person(registry, person_id)
    registry.delete(person_id)


def add_parent(registry: PersonRegistry, child_id: str, role: Role, draft: Person) -> tuple[Person, Person]:
    """Create a father or mother for ``child_id`` and link the child to it.

    The parent's sex follows ``role``. Both records are validated before
    anything is written, so a rejected request leaves the registry unchanged.
    Returns ``(parent, child)`` as stored.
    """

    child = get_person(registry, child_id)
    current = child.parent_nin(role)
    if current and registry.find_by_nin(current) is not None:
        label = "father" if role is Role.FATHER else "mother"
        raise ValidationError(f"person {child_id} already has a {label} on record")

    parent = replace(draft, id=str(uuid.uuid4()), sex=Sex.MALE if role is Role.FATHER else Sex.FEMALE)
    validate_person(parent)
    if registry.find_by_nin(parent.nin) is not None:
        raise ValidationError(f"a person with NIN {parent.nin} already exists")

    if role is Role.FATHER:
        linked = replace(child, father_nin=parent.nin, father_surname=parent.surname)
    else:
        linked = replace(child, mother_nin=parent.nin, mother_surname=parent.surname)
    validate_person(linked)

    return registry.save(parent), registry.save(linked)


def _contains(haystack: Optional[str], needle: Optional[str]) -> bool:
    if not needle:
        return True
    return needle.lower() in (haystack or "").lower()


def search_people(registry: PersonRegistry, criteria: SearchCriteria) -> list[Person]:
    """Return people matching every criterion given (case-insensitive substrings)."""

    out: list[Person] = []
    for p in registry.list_all():
        if not _contains(p.surname, criteria.surname):
            continue
        if not _contains(p.given_name, criteria.given_name):
            continue
        if criteria.nin and criteria.nin not in p.nin:
            continue
        if not _contains(p.father_surname, criteria.father_surname):
            continue
        if not _contains(p.mother_surname, criteria.mother_surname):
            continue
        out.append(p)
    return out
