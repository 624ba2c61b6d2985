from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Iterator

import psycopg


def get_database_url() -> str:
    url = os.environ.get("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set")
    return url


@contextmanager
def db_conn() -> Iterator[psycopg.Connection]:
    """Open a connection to ``DATABASE_URL``.

    psycopg's own connection context commits on clean exit and rolls back on error.
    """

    with psycopg.connect(get_database_url()) as conn:
        yield conn
