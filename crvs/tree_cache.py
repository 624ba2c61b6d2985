"""Per-principal ancestry tree snapshots.

A stored tree is returned as-is: edits to the registry do not reach trees that
were already built until they are merged in with ``update`` or rebuilt.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Protocol

from psycopg.types.json import Jsonb

from .assemble import annotate_for_tree, assemble, merge_member
from .closure import build_closure
from .db import db_conn
from .models import AncestryTree, Person
from .people import get_person, get_person_by_nin, validate_person
from .registry import ConnectionFactory, PersonRegistry

log = logging.getLogger(__name__)


class TreeStore(Protocol):
    def get(self, principal_id: str) -> Optional[AncestryTree]: ...

    def save(self, tree: AncestryTree) -> AncestryTree: ...

    def delete(self, principal_id: str) -> None: ...


class PgTreeStore:
    def __init__(self, connect: ConnectionFactory = db_conn) -> None:
        self._connect = connect

    def get(self, principal_id: str) -> Optional[AncestryTree]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT payload FROM ancestry_tree WHERE principal_id = %s",
                (principal_id,),
            ).fetchone()
        if not row:
            return None
        return AncestryTree.from_dict(row[0])

    def save(self, tree: AncestryTree) -> AncestryTree:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO ancestry_tree (principal_id, payload)
                VALUES (%s, %s)
                ON CONFLICT (principal_id) DO UPDATE
                  SET payload = EXCLUDED.payload,
                      updated_at = now()
                """.strip(),
                (tree.principal_id, Jsonb(tree.to_dict())),
            )
        return tree

    def delete(self, principal_id: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM ancestry_tree WHERE principal_id = %s", (principal_id,))


def build_tree(principal: Person, registry: PersonRegistry) -> AncestryTree:
    members = build_closure(principal, registry.list_all())
    return assemble(principal, members)


class TreeCache:
    def __init__(self, registry: PersonRegistry, store: TreeStore) -> None:
        self.registry = registry
        self.store = store

    def get_or_build(self, principal_id: str) -> AncestryTree:
        cached = self.store.get(principal_id)
        if cached is not None and cached.principal_id == principal_id:
            log.info("Tree cache hit for %s", principal_id)
            return cached

        principal = get_person(self.registry, principal_id)
        log.info("Building tree for %s (%s)", principal_id, principal.display_name)
        tree = build_tree(principal, self.registry)
        self.store.save(tree)
        log.info("Stored tree for %s with %d members", principal_id, len(tree.members))
        return tree

    def find_by_nin(self, nin: str) -> AncestryTree:
        principal = get_person_by_nin(self.registry, nin)
        return self.get_or_build(principal.id)

    def rebuild(self, principal_id: str) -> AncestryTree:
        self.store.delete(principal_id)
        return self.get_or_build(principal_id)

    def update(self, tree: AncestryTree, person: Person) -> AncestryTree:
        """Merge an edited person into ``tree`` and persist the result.

        ``tree`` is only changed once the store has accepted the merged copy.
        """

        validate_person(person)
        member = annotate_for_tree(tree, person)
        merged = merge_member(replace(tree, members=list(tree.members)), member)
        self.store.save(merged)
        tree.members = merged.members
        tree.principal = merged.principal
        log.info("Merged %s into tree %s as %s", person.id, tree.principal_id, member.relation.value)
        return tree
