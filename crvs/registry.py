"""Person registry storage.

The tree code only needs the small ``PersonRegistry`` interface; the Postgres
implementation below is what the application wires in.
"""

from __future__ import annotations

import logging
from contextlib import AbstractContextManager
from typing import Any, Callable, Optional, Protocol

import psycopg

from .db import db_conn
from .models import Person, Sex

log = logging.getLogger(__name__)

ConnectionFactory = Callable[[], AbstractContextManager[psycopg.Connection]]


class PersonRegistry(Protocol):
    def list_all(self) -> list[Person]: ...

    def find_by_id(self, person_id: str) -> Optional[Person]: ...

    def find_by_nin(self, nin: str) -> Optional[Person]: ...

    def save(self, person: Person) -> Person: ...

    def delete(self, person_id: str) -> None: ...


_PERSON_COLUMNS = """
    id, nin, surname, given_name, sex, birth_date, birth_place,
    father_surname, father_nin, mother_surname, mother_nin
""".strip()


def _row_to_person(r: tuple[Any, ...]) -> Person:
    (
        pid,
        nin,
        surname,
        given_name,
        sex,
        birth_date,
        birth_place,
        father_surname,
        father_nin,
        mother_surname,
        mother_nin,
    ) = r
    return Person(
        id=str(pid),
        nin=str(nin).strip(),
        surname=surname or "",
        given_name=given_name or "",
        sex=Sex(str(sex).strip()),
        birth_date=birth_date,
        birth_place=birth_place,
        father_surname=father_surname,
        father_nin=father_nin.strip() if father_nin else None,
        mother_surname=mother_surname,
        mother_nin=mother_nin.strip() if mother_nin else None,
    )


class PgPersonRegistry:
    def __init__(self, connect: ConnectionFactory = db_conn) -> None:
        self._connect = connect

    def list_all(self) -> list[Person]:
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT {_PERSON_COLUMNS} FROM person ORDER BY surname, given_name, id"
            ).fetchall()
        return [_row_to_person(tuple(r)) for r in rows]

    def find_by_id(self, person_id: str) -> Optional[Person]:
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT {_PERSON_COLUMNS} FROM person WHERE id = %s",
                (person_id,),
            ).fetchone()
        return _row_to_person(tuple(row)) if row else None

    def find_by_nin(self, nin: str) -> Optional[Person]:
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT {_PERSON_COLUMNS} FROM person WHERE nin = %s",
                (nin,),
            ).fetchone()
        return _row_to_person(tuple(row)) if row else None

    def save(self, person: Person) -> Person:
        with self._connect() as conn:
            conn.execute(
                f"""
                INSERT INTO person ({_PERSON_COLUMNS})
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                ON CONFLICT (id) DO UPDATE SET
                  nin = EXCLUDED.nin,
                  surname = EXCLUDED.surname,
                  given_name = EXCLUDED.given_name,
                  sex = EXCLUDED.sex,
                  birth_date = EXCLUDED.birth_date,
                  birth_place = EXCLUDED.birth_place,
                  father_surname = EXCLUDED.father_surname,
                  father_nin = EXCLUDED.father_nin,
                  mother_surname = EXCLUDED.mother_surname,
                  mother_nin = EXCLUDED.mother_nin,
                  updated_at = now()
                """.strip(),
                (
                    person.id,
                    person.nin,
                    person.surname,
                    person.given_name,
                    person.sex.value,
                    person.birth_date,
                    person.birth_place,
                    person.father_surname,
                    person.father_nin,
                    person.mother_surname,
                    person.mother_nin,
                ),
            )
        log.info("Saved person %s (nin %s)", person.id, person.nin)
        return person

    def delete(self, person_id: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM person WHERE id = %s", (person_id,))
        log.info("Deleted person %s", person_id)
