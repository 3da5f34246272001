import itertools
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from threading import Lock
from typing import Dict, List, Optional

from .config import Settings
from .db import get_connection
from .errors import PersonNotFound

logger = logging.getLogger(__name__)

SEARCHABLE_FIELDS = ("first_name", "last_name")
PERSON_COLUMNS = "id, first_name, last_name"


@dataclass(frozen=True)
class Person:
    first_name: str
    last_name: str
    id: Optional[int] = None


def _check_field(field: str) -> None:
    if field not in SEARCHABLE_FIELDS:
        raise ValueError(f"Unsupported search field: {field}")


class PersonStore(ABC):
    @abstractmethod
    def save(self, person: Person) -> Person:
        """Insert ``person`` when it has no id, otherwise overwrite the stored record."""
        raise NotImplementedError

    @abstractmethod
    def find_by_id(self, person_id: int) -> Optional[Person]:
        raise NotImplementedError

    @abstractmethod
    def find_all(self) -> List[Person]:
        raise NotImplementedError

    @abstractmethod
    def find_page(self, page: int, size: int) -> List[Person]:
        raise NotImplementedError

    @abstractmethod
    def count(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def delete_by_id(self, person_id: int) -> bool:
        """Remove the record. Returns False when there was nothing to remove."""
        raise NotImplementedError

    @abstractmethod
    def find_by(self, field: str, value: str) -> List[Person]:
        """Exact, case-sensitive match on one of ``SEARCHABLE_FIELDS``."""
        raise NotImplementedError

    def find_by_last_name(self, name: str) -> List[Person]:
        return self.find_by("last_name", name)


class MemoryPersonStore(PersonStore):
    def __init__(self) -> None:
        self._lock = Lock()
        self._ids = itertools.count(1)  # ids are never reused after delete
        self._rows: Dict[int, Person] = {}

    def save(self, person: Person) -> Person:
        with self._lock:
            if person.id is None:
                person = replace(person, id=next(self._ids))
            elif person.id not in self._rows:
                raise PersonNotFound(person.id)
            self._rows[person.id] = person
        logger.debug("saved person %s", person.id)
        return person

    def find_by_id(self, person_id: int) -> Optional[Person]:
        return self._rows.get(person_id)

    def find_all(self) -> List[Person]:
        with self._lock:
            return [self._rows[key] for key in sorted(self._rows)]

    def find_page(self, page: int, size: int) -> List[Person]:
        start = page * size
        return self.find_all()[start:start + size]

    def count(self) -> int:
        return len(self._rows)

    def delete_by_id(self, person_id: int) -> bool:
        with self._lock:
            removed = self._rows.pop(person_id, None)
        if removed is not None:
            logger.debug("deleted person %s", person_id)
        return removed is not None

    def find_by(self, field: str, value: str) -> List[Person]:
        _check_field(field)
        return [person for person in self.find_all() if getattr(person, field) == value]


def _to_person(row) -> Person:
    return Person(id=row["id"], first_name=row["first_name"], last_name=row["last_name"])


class PostgresPersonStore(PersonStore):
    def __init__(self, database_url: str) -> None:
        self.database_url = database_url

    def _connect(self):
        return get_connection(self.database_url)

    def save(self, person: Person) -> Person:
        with self._connect() as conn, conn.cursor() as cur:
            if person.id is None:
                cur.execute(
                    f"INSERT INTO people (first_name, last_name) VALUES (%s, %s) RETURNING {PERSON_COLUMNS};",
                    (person.first_name, person.last_name),
                )
            else:
                cur.execute(
                    f"UPDATE people SET first_name=%s, last_name=%s WHERE id=%s RETURNING {PERSON_COLUMNS};",
                    (person.first_name, person.last_name, person.id),
                )
            row = cur.fetchone()
            conn.commit()
        if not row:
            raise PersonNotFound(person.id)
        logger.debug("saved person %s", row["id"])
        return _to_person(row)

    def find_by_id(self, person_id: int) -> Optional[Person]:
        with self._connect() as conn, conn.cursor() as cur:
            cur.execute(f"SELECT {PERSON_COLUMNS} FROM people WHERE id=%s;", (person_id,))
            row = cur.fetchone()
        return _to_person(row) if row else None

    def find_all(self) -> List[Person]:
        with self._connect() as conn, conn.cursor() as cur:
            cur.execute(f"SELECT {PERSON_COLUMNS} FROM people ORDER BY id;")
            rows = cur.fetchall()
        return [_to_person(row) for row in rows]

    def find_page(self, page: int, size: int) -> List[Person]:
        with self._connect() as conn, conn.cursor() as cur:
            cur.execute(
                f"SELECT {PERSON_COLUMNS} FROM people ORDER BY id LIMIT %s OFFSET %s;",
                (size, page * size),
            )
            rows = cur.fetchall()
        return [_to_person(row) for row in rows]

    def count(self) -> int:
        with self._connect() as conn, conn.cursor() as cur:
            cur.execute("SELECT COUNT(*) AS c FROM people;")
            row = cur.fetchone()
        return row["c"] if row else 0

    def delete_by_id(self, person_id: int) -> bool:
        with self._connect() as conn, conn.cursor() as cur:
            cur.execute("DELETE FROM people WHERE id=%s RETURNING id;", (person_id,))
            row = cur.fetchone()
            conn.commit()
        if row:
            logger.debug("deleted person %s", person_id)
        return row is not None

    def find_by(self, field: str, value: str) -> List[Person]:
        _check_field(field)
        with self._connect() as conn, conn.cursor() as cur:
            cur.execute(
                f"SELECT {PERSON_COLUMNS} FROM people WHERE {field}=%s ORDER BY id;",
                (value,),
            )
            rows = cur.fetchall()
        return [_to_person(row) for row in rows]


def create_store(settings: Settings) -> PersonStore:
    if settings.database_url:
        logger.info("using postgres person store")
        return PostgresPersonStore(settings.database_url)
    logger.info("DATABASE_URL not set, using in-memory person store")
    return MemoryPersonStore()
