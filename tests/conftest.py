from __future__ import annotations

from typing import Callable, Optional

import pytest

from crvs.models import AncestryTree, Person, Sex
from crvs.seed import sample_family
from crvs.tree_cache import TreeCache


class _MemoryRegistry:
    """In-memory PersonRegistry; keeps insertion order like a list-backed store."""

    def __init__(self, people: list[Person] | None = None) -> None:
        self.people: dict[str, Person] = {p.id: p for p in people or []}
        self.list_calls = 0

    def list_all(self) -> list[Person]:
        self.list_calls += 1
        return list(self.people.values())

    def find_by_id(self, person_id: str) -> Optional[Person]:
        return self.people.get(person_id)

    def find_by_nin(self, nin: str) -> Optional[Person]:
        for p in self.people.values():
            if p.nin == nin:
                return p
        return None

    def save(self, person: Person) -> Person:
        self.people[person.id] = person
        return person

    def delete(self, person_id: str) -> None:
        self.people.pop(person_id, None)


class _MemoryTreeStore:
    def __init__(self) -> None:
        self.trees: dict[str, dict] = {}
        self.saves = 0

    def get(self, principal_id: str) -> Optional[AncestryTree]:
        payload = self.trees.get(principal_id)
        return AncestryTree.from_dict(payload) if payload is not None else None

    def save(self, tree: AncestryTree) -> AncestryTree:
        # Store the serialised form so tests exercise the JSON round trip.
        self.trees[tree.principal_id] = tree.to_dict()
        self.saves += 1
        return tree

    def delete(self, principal_id: str) -> None:
        self.trees.pop(principal_id, None)


@pytest.fixture()
def make_person() -> Callable[..., Person]:
    def _make(
        pid: str,
        nin: str,
        *,
        sex: Sex = Sex.MALE,
        father_nin: str | None = None,
        mother_nin: str | None = None,
        surname: str = "Doe",
        given_name: str | None = None,
    ) -> Person:
        return Person(
            id=pid,
            nin=nin,
            surname=surname,
            given_name=given_name or f"Person {pid}",
            sex=sex,
            father_nin=father_nin,
            mother_nin=mother_nin,
        )

    return _make


@pytest.fixture()
def family() -> list[Person]:
    return sample_family()


@pytest.fixture()
def registry(family: list[Person]) -> _MemoryRegistry:
    return _MemoryRegistry(family)


@pytest.fixture()
def empty_registry() -> _MemoryRegistry:
    return _MemoryRegistry()


@pytest.fixture()
def tree_store() -> _MemoryTreeStore:
    return _MemoryTreeStore()


@pytest.fixture()
def cache(registry: _MemoryRegistry, tree_store: _MemoryTreeStore) -> TreeCache:
    return TreeCache(registry, tree_store)
