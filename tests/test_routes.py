from __future__ import annotations

import pytest
from fastapi import HTTPException

import crvs.routes.demo as demo_routes
import crvs.routes.people as people_routes
import crvs.routes.trees as tree_routes
from crvs.layout import LayoutMode
from crvs.tree_cache import TreeCache


def _person_in(**kw) -> people_routes.PersonIn:
    data = {
        "nin": "100000000000001",
        "surname": "Traore",
        "given_name": "Awa",
        "sex": "F",
    }
    data.update(kw)
    return people_routes.PersonIn(**data)


def _list(registry, **kw):
    params = {
        "surname": None,
        "given_name": None,
        "nin": None,
        "father_surname": None,
        "mother_surname": None,
    }
    params.update(kw)
    return people_routes.list_people(registry=registry, **params)


class TestPeopleRoutes:
    def test_list_with_filter(self, registry) -> None:
        payload = _list(registry, surname="toure")
        assert payload["total"] == 2
        assert {r["id"] for r in payload["results"]} == {"7", "14"}

    def test_get_includes_display_fields(self, registry) -> None:
        payload = people_routes.get_person_route("1", registry=registry)
        assert payload["display_name"] == "Amadou Keita"
        assert payload["nin_display"] == "123456-789012-345"
        assert payload["birth_date"] == "2000-06-15"

    def test_get_unknown_is_404(self, registry) -> None:
        with pytest.raises(HTTPException) as exc:
            people_routes.get_person_route("nope", registry=registry)
        assert exc.value.status_code == 404

    def test_by_nin(self, registry) -> None:
        payload = people_routes.get_person_by_nin_route("123456789054321", registry=registry)
        assert payload["id"] == "2"

    def test_create_rejects_short_nin(self, empty_registry) -> None:
        with pytest.raises(HTTPException) as exc:
            people_routes.create_person_route(_person_in(nin="12345"), registry=empty_registry)
        assert exc.value.status_code == 400
        assert empty_registry.people == {}

    def test_create_blank_parent_fields_become_none(self, empty_registry) -> None:
        payload = people_routes.create_person_route(_person_in(father_nin="  ", birth_place=""), registry=empty_registry)
        assert payload["father_nin"] is None
        assert payload["birth_place"] is None
        assert payload["id"] in empty_registry.people

    def test_update_and_delete(self, registry) -> None:
        body = _person_in(nin="123456789888888", given_name="Fanta", surname="Maiga", birth_place="Ansongo")
        payload = people_routes.update_person_route("15", body, registry=registry)
        assert payload["birth_place"] == "Ansongo"

        assert people_routes.delete_person_route("15", registry=registry) == {"deleted": "15"}
        with pytest.raises(HTTPException) as exc:
            people_routes.delete_person_route("15", registry=registry)
        assert exc.value.status_code == 404


class TestTreeRoutes:
    def test_get_tree(self, cache: TreeCache) -> None:
        payload = tree_routes.get_tree("1", cache=cache)
        assert payload["total"] == 15
        assert payload["principal"]["relation"] == "principal"
        relations = {m["relation"] for m in payload["members"]}
        assert "arriere-grand-mere-maternelle-maternelle" in relations

    def test_get_tree_unknown_is_404(self, cache: TreeCache) -> None:
        with pytest.raises(HTTPException) as exc:
            tree_routes.get_tree("nope", cache=cache)
        assert exc.value.status_code == 404

    def test_tree_by_nin_cleans_input(self, cache: TreeCache) -> None:
        payload = tree_routes.get_tree_by_nin("123456-789054-321", cache=cache)
        assert payload["principal"]["id"] == "2"

    def test_tree_by_bad_nin_is_400(self, cache: TreeCache) -> None:
        with pytest.raises(HTTPException) as exc:
            tree_routes.get_tree_by_nin("12345", cache=cache)
        assert exc.value.status_code == 400

    def test_graph_payload(self, cache: TreeCache) -> None:
        payload = tree_routes.get_tree_graph("1", cache=cache)
        node_ids = {n["id"] for n in payload["nodes"]}
        assert len(node_ids) == 15
        for link in payload["links"]:
            assert link["source"] in node_ids
            assert link["target"] in node_ids
            assert link["type"] == "parent-enfant"

    def test_layout_generational(self, cache: TreeCache) -> None:
        payload = tree_routes.get_tree_layout("1", mode=LayoutMode.GENERATIONAL, width=1000, height=800, cache=cache)
        assert payload["layout"] == "generational"
        assert len(payload["nodes"]) == 15
        assert all("x" in n and "y" in n for n in payload["nodes"])

    def test_layout_hierarchical(self, cache: TreeCache) -> None:
        payload = tree_routes.get_tree_layout("1", mode=LayoutMode.HIERARCHICAL, width=1000, height=800, cache=cache)
        assert payload["layout"] == "hierarchical"
        assert payload["requested"] == "hierarchical"
        assert payload["root"]["id"] == "1"
        assert len(payload["root"]["children"]) == 2

    def test_merge_member(self, cache: TreeCache, tree_store) -> None:
        body = _person_in(
            nin="123456789098765",
            surname="Coulibaly",
            given_name="Fatoumata",
            birth_place="Kita",
            father_nin="123456789033333",
            mother_nin="123456789044444",
        )
        payload = tree_routes.merge_tree_member("1", "3", body, cache=cache)
        mother = next(m for m in payload["members"] if m["id"] == "3")
        assert mother["birth_place"] == "Kita"
        assert mother["relation"] == "mere"
        assert tree_store.get("1").member_by_id("3").person.birth_place == "Kita"

    def test_merge_unrelated_person_is_400(self, cache: TreeCache) -> None:
        with pytest.raises(HTTPException) as exc:
            tree_routes.merge_tree_member("1", "99", _person_in(nin="999999999999999"), cache=cache)
        assert exc.value.status_code == 400

    def test_rebuild(self, cache: TreeCache, registry) -> None:
        tree_routes.get_tree("1", cache=cache)
        registry.delete("15")
        payload = tree_routes.rebuild_tree("1", cache=cache)
        assert payload["total"] == 14


def test_demo_seed_loads_family(empty_registry, tree_store) -> None:
    tree_store.trees["1"] = {"stale": True}
    payload = demo_routes.demo_seed(registry=empty_registry, store=tree_store)
    assert payload == {"loaded": 15, "principal_id": "1"}
    assert len(empty_registry.people) == 15
    assert "1" not in tree_store.trees


def test_merge_member_with_bad_nin_is_400(cache: TreeCache, registry) -> None:
    with pytest.raises(HTTPException) as exc:
        tree_routes.merge_tree_member("1", "2", _person_in(nin="abc", sex="M"), cache=cache)
    assert exc.value.status_code == 400


def test_merge_member_duplicating_a_member_nin_is_400(cache: TreeCache) -> None:
    body = _person_in(nin="123456789054321", surname="Keita", given_name="Ibrahim", sex="M")
    with pytest.raises(HTTPException) as exc:
        tree_routes.merge_tree_member("1", "99", body, cache=cache)
    assert exc.value.status_code == 400
    assert tree_routes.get_tree("1", cache=cache)["total"] == 15


def test_add_parent_route_links_new_father(registry) -> None:
    body = people_routes.ParentIn(nin="123456789999999", surname="Keita", given_name="Sekou")
    payload = people_routes.add_parent_route("8", "father", body, registry=registry)
    assert payload["parent"]["sex"] == "M"
    assert payload["child"]["father_nin"] == "123456789999999"
    assert registry.people["8"].father_surname == "Keita"


def test_add_parent_route_rejects_existing_parent(registry) -> None:
    body = people_routes.ParentIn(nin="123456789999999", surname="Keita", given_name="Sekou")
    with pytest.raises(HTTPException) as exc:
        people_routes.add_parent_route("1", "mother", body, registry=registry)
    assert exc.value.status_code == 400
