from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import closing, contextmanager
from datetime import date
from pathlib import Path

from birthday_keeper.date_logic import (
    LEAP_DAY_RULES,
    missed_birthdays,
    todays_birthdays,
    upcoming_birthdays,
)
from birthday_keeper.models import (
    DEFAULT_LEAP_DAY_RULE,
    DEFAULT_UPCOMING_LIMIT,
    BirthdayPerson,
    MissedBirthday,
    TodayBirthday,
    UpcomingBirthday,
)

LOGGER = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS birthdays (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    birth_date TEXT NOT NULL
)
"""


def _row_to_person(row: tuple[int, str, str]) -> BirthdayPerson:
    person_id, name, birth_date = row
    return BirthdayPerson(id=int(person_id), name=str(name), birth_date=date.fromisoformat(birth_date))


def _clean_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise ValueError("name must not be empty")
    return cleaned


class BirthdayRepository:
    """Birthday records in a single SQLite table plus the date-projection queries over them.

    A connection is opened for each operation and closed right after it.
    """

    def __init__(
        self,
        db_path: Path,
        *,
        leap_day_rule: str = DEFAULT_LEAP_DAY_RULE,
        upcoming_limit: int = DEFAULT_UPCOMING_LIMIT,
    ) -> None:
        if leap_day_rule not in LEAP_DAY_RULES:
            raise ValueError(f"leap_day_rule must be one of {sorted(LEAP_DAY_RULES)}")
        self._db_path = Path(db_path)
        self._leap_day_rule = leap_day_rule
        self._upcoming_limit = upcoming_limit
        self.initialize()

    @property
    def db_path(self) -> Path:
        return self._db_path

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        with closing(sqlite3.connect(self._db_path)) as conn:
            with conn:
                yield conn

    def initialize(self) -> None:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as conn:
            conn.execute(SCHEMA)

    def insert(self, name: str, birth_date: date) -> int:
        with self._connect() as conn:
            cur = conn.execute(
                "INSERT INTO birthdays (name, birth_date) VALUES (?, ?);",
                (_clean_name(name), birth_date.isoformat()),
            )
            person_id = int(cur.lastrowid)
        LOGGER.info("Inserted birthday id=%s", person_id)
        return person_id

    def delete(self, person_id: int) -> None:
        with self._connect() as conn:
            deleted = conn.execute("DELETE FROM birthdays WHERE id = ?;", (person_id,)).rowcount
        LOGGER.info("Deleted birthday id=%s (rows=%s)", person_id, deleted)

    def update(self, person: BirthdayPerson) -> None:
        if person.id is None:
            raise ValueError("Cannot update a birthday that has no id")

        with self._connect() as conn:
            updated = conn.execute(
                "UPDATE birthdays SET name = ?, birth_date = ? WHERE id = ?;",
                (_clean_name(person.name), person.birth_date.isoformat(), person.id),
            ).rowcount
        LOGGER.info("Updated birthday id=%s (rows=%s)", person.id, updated)

    def list_all(self) -> list[BirthdayPerson]:
        with self._connect() as conn:
            rows = conn.execute("SELECT id, name, birth_date FROM birthdays ORDER BY id;").fetchall()
        return [_row_to_person(row) for row in rows]

    def get(self, person_id: int) -> BirthdayPerson | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id, name, birth_date FROM birthdays WHERE id = ?;",
                (person_id,),
            ).fetchone()
        return _row_to_person(row) if row is not None else None

    def today(self, today: date) -> list[TodayBirthday]:
        return todays_birthdays(self.list_all(), today, self._leap_day_rule)

    def upcoming(self, today: date, limit: int | None = None) -> list[UpcomingBirthday]:
        effective_limit = self._upcoming_limit if limit is None else limit
        return upcoming_birthdays(self.list_all(), today, self._leap_day_rule, effective_limit)

    def missed(self, today: date) -> list[MissedBirthday]:
        return missed_birthdays(self.list_all(), today, self._leap_day_rule)
