from __future__ import annotations

from dataclasses import replace

import pytest

from crvs.errors import NotFoundError, ValidationError
from crvs.models import Relation
from crvs.tree_cache import TreeCache


def test_get_or_build_builds_and_persists(cache: TreeCache, tree_store) -> None:
    tree = cache.get_or_build("1")
    assert tree.principal_id == "1"
    assert len(tree.members) == 15
    assert "1" in tree_store.trees
    assert tree_store.saves == 1


def test_second_call_uses_stored_tree(cache: TreeCache, registry, tree_store) -> None:
    cache.get_or_build("1")
    calls = registry.list_calls

    again = cache.get_or_build("1")

    assert registry.list_calls == calls
    assert tree_store.saves == 1
    assert len(again.members) == 15


def test_cached_tree_is_a_frozen_snapshot(cache: TreeCache, registry) -> None:
    cache.get_or_build("1")
    registry.save(replace(registry.people["2"], given_name="Renamed"))

    tree = cache.get_or_build("1")
    assert tree.member_by_id("2").person.given_name == "Ibrahim"


def test_rebuild_picks_up_registry_changes(cache: TreeCache, registry) -> None:
    cache.get_or_build("1")
    registry.save(replace(registry.people["2"], given_name="Renamed"))

    tree = cache.rebuild("1")
    assert tree.member_by_id("2").person.given_name == "Renamed"


def test_unknown_principal_is_not_found(cache: TreeCache, tree_store) -> None:
    with pytest.raises(NotFoundError):
        cache.get_or_build("nope")
    assert tree_store.trees == {}


def test_find_by_nin(cache: TreeCache) -> None:
    tree = cache.find_by_nin("123456789054321")
    assert tree.principal_id == "2"
    assert tree.member_by_id("4").relation is Relation.FATHER


def test_find_by_nin_rejects_malformed(cache: TreeCache) -> None:
    with pytest.raises(ValidationError):
        cache.find_by_nin("12345")


def test_trees_are_independent_per_principal(cache: TreeCache) -> None:
    grandson = cache.get_or_build("1")
    son = cache.get_or_build("2")
    assert grandson.member_by_id("4").relation is Relation.PATERNAL_GRANDFATHER
    assert son.member_by_id("4").relation is Relation.FATHER
    assert len(son.members) == 7


def test_update_merges_and_persists(cache: TreeCache, registry, tree_store) -> None:
    tree = cache.get_or_build("1")
    edited = replace(registry.people["3"], birth_place="Bamako")

    cache.update(tree, edited)

    stored = tree_store.get("1")
    assert stored.member_by_id("3").person.birth_place == "Bamako"
    assert stored.member_by_id("3").relation is Relation.MOTHER
    assert len(stored.members) == 15


def test_update_of_principal_moves_principal_reference(cache: TreeCache, registry, tree_store) -> None:
    tree = cache.get_or_build("1")
    cache.update(tree, replace(registry.people["1"], surname="Keïta"))
    assert tree_store.get("1").principal.person.surname == "Keïta"


def test_update_does_not_touch_other_trees(cache: TreeCache, registry, tree_store) -> None:
    grandson = cache.get_or_build("1")
    cache.get_or_build("2")

    cache.update(grandson, replace(registry.people["4"], birth_place="Kita"))

    assert tree_store.get("2").member_by_id("4").person.birth_place == "Koulikoro"


def test_update_rejects_malformed_nin(cache: TreeCache, registry, tree_store) -> None:
    tree = cache.get_or_build("1")
    with pytest.raises(ValidationError):
        cache.update(tree, replace(registry.people["2"], nin="abc"))
    assert tree_store.get("1").member_by_id("2").person.nin == "123456789054321"
    assert tree_store.saves == 1


def test_update_rejects_copy_of_existing_member(cache: TreeCache, registry, tree_store) -> None:
    tree = cache.get_or_build("1")
    with pytest.raises(ValidationError):
        cache.update(tree, replace(registry.people["2"], id="99"))
    stored = tree_store.get("1")
    assert len(stored.members) == 15
    assert [m.relation for m in stored.members].count(Relation.FATHER) == 1


class _FailingStore:
    def __init__(self, inner) -> None:
        self.inner = inner
        self.fail = False

    def get(self, principal_id: str):
        return self.inner.get(principal_id)

    def save(self, tree):
        if self.fail:
            raise RuntimeError("store unavailable")
        return self.inner.save(tree)

    def delete(self, principal_id: str) -> None:
        self.inner.delete(principal_id)


def test_failed_save_leaves_caller_tree_untouched(registry, tree_store) -> None:
    store = _FailingStore(tree_store)
    cache = TreeCache(registry, store)
    tree = cache.get_or_build("1")
    store.fail = True

    with pytest.raises(RuntimeError):
        cache.update(tree, replace(registry.people["3"], birth_place="Bamako"))

    assert tree.member_by_id("3").person.birth_place == "Kayes"
    assert tree_store.get("1").member_by_id("3").person.birth_place == "Kayes"


def test_update_refreshes_caller_tree_after_save(cache: TreeCache, registry) -> None:
    tree = cache.get_or_build("1")
    returned = cache.update(tree, replace(registry.people["1"], given_name="Amadou Jr"))
    assert returned is tree
    assert tree.principal.person.given_name == "Amadou Jr"
    assert tree.member_by_id("1").person.given_name == "Amadou Jr"
