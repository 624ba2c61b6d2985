"""Sample four-generation family used by the demo endpoint and admin CLI."""

from __future__ import annotations

from datetime import date

from .models import Person, Sex
from .registry import PersonRegistry

_M = Sex.MALE
_F = Sex.FEMALE

# (id, nin, surname, given_name, sex, birth_date, birth_place,
#  father_surname, father_nin, mother_surname, mother_nin)
_SAMPLE_ROWS = [
    ("1", "123456789012345", "Keita", "Amadou", _M, date(2000, 6, 15), "Bamako",
     "Keita", "123456789054321", "Coulibaly", "123456789098765"),
    ("2", "123456789054321", "Keita", "Ibrahim", _M, date(1970, 4, 10), "Sikasso",
     "Keita", "123456789011111", "Diallo", "123456789022222"),
    ("3", "123456789098765", "Coulibaly", "Fatoumata", _F, date(1975, 8, 22), "Kayes",
     "Coulibaly", "123456789033333", "Toure", "123456789044444"),
    ("4", "123456789011111", "Keita", "Moussa", _M, date(1945, 3, 5), "Koulikoro",
     "Keita", "123456789111111", "Sylla", "123456789222222"),
    ("5", "123456789022222", "Diallo", "Aminata", _F, date(1950, 10, 17), "Mopti",
     "Diallo", "123456789333333", "Traore", "123456789444444"),
    ("6", "123456789033333", "Coulibaly", "Bakary", _M, date(1948, 12, 30), "Segou",
     "Coulibaly", "123456789555555", "Sangare", "123456789666666"),
    ("7", "123456789044444", "Toure", "Maimouna", _F, date(1952, 2, 25), "Gao",
     "Toure", "123456789777777", "Maiga", "123456789888888"),
    ("8", "123456789111111", "Keita", "Seydou", _M, date(1920, 6, 10), "Kati",
     None, None, None, None),
    ("9", "123456789222222", "Sylla", "Kadiatou", _F, date(1925, 9, 15), "Koulikoro",
     None, None, None, None),
    ("10", "123456789333333", "Diallo", "Oumar", _M, date(1922, 4, 20), "Mopti",
     None, None, None, None),
    ("11", "123456789444444", "Traore", "Oumou", _F, date(1927, 11, 5), "Djenné",
     None, None, None, None),
    ("12", "123456789555555", "Coulibaly", "Modibo", _M, date(1918, 8, 12), "Segou",
     None, None, None, None),
    ("13", "123456789666666", "Sangare", "Mariam", _F, date(1923, 3, 8), "Sikasso",
     None, None, None, None),
    ("14", "123456789777777", "Toure", "Amadou", _M, date(1921, 2, 15), "Tombouctou",
     None, None, None, None),
    ("15", "123456789888888", "Maiga", "Fanta", _F, date(1926, 7, 28), "Gao",
     None, None, None, None),
]


def sample_family() -> list[Person]:
    return [
        Person(
            id=pid,
            nin=nin,
            surname=surname,
            given_name=given_name,
            sex=sex,
            birth_date=birth_date,
            birth_place=birth_place,
            father_surname=father_surname,
            father_nin=father_nin,
            mother_surname=mother_surname,
            mother_nin=mother_nin,
        )
        for (
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
        ) in _SAMPLE_ROWS
    ]


def seed_registry(registry: PersonRegistry) -> list[Person]:
    """Upsert the sample family; existing records with the same ids are replaced."""
    return [registry.save(p) for p in sample_family()]
