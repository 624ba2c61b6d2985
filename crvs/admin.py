"""CLI admin tool for the registry database.

Usage:
    python -m crvs.admin init-schema
    python -m crvs.admin seed
    python -m crvs.admin show-tree --id=1 [--rebuild]
    python -m crvs.admin serve --host=127.0.0.1 --port=8000
"""

from __future__ import annotations

import argparse
from pathlib import Path

import uvicorn

from .db import db_conn
from .errors import NotFoundError
from .main import configure_logging
from .nin import format_nin
from .registry import PgPersonRegistry
from .seed import seed_registry
from .tree_cache import PgTreeStore, TreeCache

_SCHEMA_SQL = Path(__file__).resolve().parent.parent / "sql" / "schema.sql"


def cmd_init_schema(args: argparse.Namespace) -> None:
    if not _SCHEMA_SQL.exists():
        raise SystemExit(f"schema not found: {_SCHEMA_SQL}")
    with db_conn() as conn:
        conn.execute(_SCHEMA_SQL.read_text(encoding="utf-8"))
    print("Schema ready.")


def cmd_seed(args: argparse.Namespace) -> None:
    store = PgTreeStore()
    people = seed_registry(PgPersonRegistry())
    for p in people:
        store.delete(p.id)
    print(f"Loaded {len(people)} sample people.")


def cmd_show_tree(args: argparse.Namespace) -> None:
    cache = TreeCache(PgPersonRegistry(), PgTreeStore())
    try:
        tree = cache.rebuild(args.id) if args.rebuild else cache.get_or_build(args.id)
    except NotFoundError as e:
        raise SystemExit(str(e)) from e
    for m in sorted(tree.members, key=lambda m: m.generation):
        p = m.person
        print(f"{m.generation}  {m.relation.value:<42} {format_nin(p.nin)}  {p.display_name}")


def cmd_serve(args: argparse.Namespace) -> None:
    uvicorn.run("crvs.main:app", host=args.host, port=args.port)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="crvs.admin", description="Civil registry admin CLI")
    sub = parser.add_subparsers(dest="command")

    # init-schema
    sub.add_parser("init-schema", help="Create the person and ancestry_tree tables")

    # seed
    sub.add_parser("seed", help="Load the sample four-generation family")

    # show-tree
    p = sub.add_parser("show-tree", help="Print a principal's ancestry tree")
    p.add_argument("--id", required=True, help="Principal person id")
    p.add_argument("--rebuild", action="store_true", help="Drop the stored snapshot first")

    # serve
    p = sub.add_parser("serve", help="Run the HTTP API")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1

    configure_logging()
    dispatch = {
        "init-schema": cmd_init_schema,
        "seed": cmd_seed,
        "show-tree": cmd_show_tree,
        "serve": cmd_serve,
    }
    dispatch[args.command](args)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
