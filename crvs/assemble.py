from __future__ import annotations

from .errors import ValidationError
from .models import (
    AncestryTree,
    GraphLink,
    GraphNode,
    LinkKind,
    Person,
    Relation,
    Role,
    TreeGraph,
    TreeMember,
)


def assemble(principal: Person, members: list[TreeMember]) -> AncestryTree:
    """Wrap a closure into a tree, making sure the principal is a member."""

    root = None
    out: list[TreeMember] = []
    seen: set[str] = set()
    for m in members:
        if m.id in seen:
            continue
        seen.add(m.id)
        if m.id == principal.id:
            m = TreeMember(person=m.person, relation=Relation.PRINCIPAL)
            root = m
        out.append(m)

    if root is None:
        root = TreeMember(person=principal, relation=Relation.PRINCIPAL)
        out.insert(0, root)

    return AncestryTree(principal=root, members=out)


def _node_for(member: TreeMember, *, is_principal: bool) -> GraphNode:
    p = member.person
    relation = Relation.PRINCIPAL if is_principal else member.relation
    return GraphNode(
        id=p.id,
        nin=p.nin,
        surname=p.surname,
        given_name=p.given_name,
        sex=p.sex,
        generation=0 if is_principal else member.generation,
        relation=relation.value,
        father_nin=p.father_nin,
        mother_nin=p.mother_nin,
    )


def to_graph(tree: AncestryTree) -> TreeGraph:
    """Flatten a tree into render nodes and parent -> child links.

    A link is emitted only when the child's parent NIN matches another member of
    the same tree. Duplicate links are dropped.
    """

    nodes: list[GraphNode] = []
    links: list[GraphLink] = []
    seen_links: set[tuple[str, str]] = set()

    id_by_nin: dict[str, str] = {}
    for m in tree.members:
        id_by_nin.setdefault(m.person.nin, m.id)

    seen_nodes: set[str] = set()
    for m in tree.members:
        if m.id in seen_nodes:
            continue
        seen_nodes.add(m.id)
        nodes.append(_node_for(m, is_principal=m.id == tree.principal_id))

        for parent_nin in (m.person.father_nin, m.person.mother_nin):
            if not parent_nin:
                continue
            parent_id = id_by_nin.get(parent_nin)
            if parent_id is None or parent_id == m.id:
                continue
            key = (parent_id, m.id)
            if key in seen_links:
                continue
            seen_links.add(key)
            links.append(GraphLink(source=parent_id, target=m.id, kind=LinkKind.PARENT_CHILD))

    return TreeGraph(nodes=nodes, links=links)


def merge_member(tree: AncestryTree, member: TreeMember) -> AncestryTree:
    """Replace the member with the same id in place, or append it.

    The principal reference follows the edit when the principal itself changes.
    The tree is updated in place and returned; persisting it is up to the caller.
    """

    for i, m in enumerate(tree.members):
        if m.id == member.id:
            tree.members[i] = member
            break
    else:
        tree.members.append(member)

    if tree.principal.id == member.id:
        tree.principal = member

    return tree


def annotate_for_tree(tree: AncestryTree, person: Person) -> TreeMember:
    """Work out where an edited or newly created person sits in ``tree``.

    Existing members keep their relation. A new person is placed above the
    member that references its NIN as father or mother. Each NIN and each
    relation is held by at most one member, and an ancestor's NIN cannot be
    changed here because its child's reference would no longer match.
    """

    for m in tree.members:
        if m.id != person.id and m.person.nin == person.nin:
            raise ValidationError(f"NIN {person.nin} already belongs to member {m.id} of this tree")

    existing = tree.member_by_id(person.id)
    if existing is not None:
        if existing.relation is not Relation.PRINCIPAL and existing.person.nin != person.nin:
            raise ValidationError(
                f"cannot change the NIN of {existing.relation.value} {person.id} inside the tree; "
                "update the registry record and rebuild"
            )
        return existing.with_person(person)

    taken = {m.relation for m in tree.members}
    for m in tree.members:
        for role in (Role.FATHER, Role.MOTHER):
            if m.person.parent_nin(role) != person.nin:
                continue
            relation = m.relation.parent_relation(role)
            if relation is None:
                continue
            if relation in taken:
                raise ValidationError(f"{relation.value} is already present in this tree")
            return TreeMember(person=person, relation=relation)

    raise ValidationError(
        f"person {person.id} is not an ancestor of {tree.principal_id} within this tree"
    )
