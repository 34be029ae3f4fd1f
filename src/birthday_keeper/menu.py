from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import replace
from datetime import date

from birthday_keeper.console import Console
from birthday_keeper.date_logic import InvalidBirthdayError
from birthday_keeper.models import BirthdayPerson, MissedBirthday, TodayBirthday, UpcomingBirthday
from birthday_keeper.repository import BirthdayRepository

LOGGER = logging.getLogger(__name__)

WELCOME_TEXT = "Welcome to Birthday Reminder!"

CHOICE_ADD = "1"
CHOICE_LIST_ALL = "2"
CHOICE_UPCOMING = "3"
CHOICE_TODAY = "4"
CHOICE_MISSED = "5"
CHOICE_DELETE = "6"
CHOICE_EDIT = "7"
CHOICE_EXIT = "8"

# SQLite INTEGER is a signed 64-bit value.
MIN_RECORD_ID = -(2**63)
MAX_RECORD_ID = 2**63 - 1


def parse_name(raw_text: str) -> str:
    name = raw_text.strip()
    if not name:
        raise ValueError("name cannot be empty")
    return name


def parse_birth_date(raw_text: str, today: date) -> date:
    """Parse ``YYYY-MM-DD`` or ``DD.MM.YYYY`` and reject dates after ``today``."""
    value = raw_text.strip()

    iso_match = re.fullmatch(r"(\d{4})-(\d{1,2})-(\d{1,2})", value)
    dotted_match = re.fullmatch(r"(\d{1,2})\.(\d{1,2})\.(\d{4})", value)
    if iso_match:
        year, month, day = (int(part) for part in iso_match.groups())
    elif dotted_match:
        day, month, year = (int(part) for part in dotted_match.groups())
    else:
        raise InvalidBirthdayError("invalid date format, use YYYY-MM-DD")

    try:
        parsed = date(year, month, day)
    except ValueError as exc:
        raise InvalidBirthdayError(f"invalid date: {value}") from exc

    if parsed > today:
        raise InvalidBirthdayError("birth date cannot be in the future")
    return parsed


def parse_record_id(raw_text: str) -> int | None:
    value = raw_text.strip()
    if not value:
        return None
    try:
        record_id = int(value)
    except ValueError as exc:
        raise ValueError("invalid ID format") from exc
    if not MIN_RECORD_ID <= record_id <= MAX_RECORD_ID:
        raise ValueError("invalid ID format")
    return record_id


def format_full_date(value: date) -> str:
    return f"{value.day:02d}.{value.month:02d}.{value.year:04d}"


def format_month_day(value: date) -> str:
    return f"{value.day:02d}.{value.month:02d}"


def _format_days(days: int) -> str:
    return "1 day" if days == 1 else f"{days} days"


def _render_menu() -> str:
    return (
        "\nMain menu:\n"
        "1. Add birthday\n"
        "2. Show all birthdays\n"
        "3. Show upcoming birthdays\n"
        "4. Show today's birthdays\n"
        "5. Show missed birthdays\n"
        "6. Delete record\n"
        "7. Edit record\n"
        "8. Exit"
    )


def _render_all_lines(persons: list[BirthdayPerson]) -> list[str]:
    ordered = sorted(persons, key=lambda person: person.birth_date)
    return [f"[ID: {person.id}] {person.name} - {format_full_date(person.birth_date)}" for person in ordered]


def _render_today_lines(rows: list[TodayBirthday]) -> list[str]:
    return [f"  {row.person.name} - turns {row.age}!" for row in rows]


def _render_upcoming_lines(rows: list[UpcomingBirthday]) -> list[str]:
    lines: list[str] = []
    for row in rows:
        when = "today" if row.days_until == 0 else f"in {_format_days(row.days_until)}"
        lines.append(f"  {row.person.name} - {format_month_day(row.person.birth_date)} ({when})")
    return lines


def _render_missed_lines(rows: list[MissedBirthday]) -> list[str]:
    return [
        f"  {row.person.name} - {format_month_day(row.person.birth_date)} ({_format_days(row.days_since)} ago)"
        for row in rows
    ]


class BirthdayMenu:
    """Interactive menu over a :class:`BirthdayRepository`.

    ``clock`` is read once per menu action; that single reference date is
    passed to every query and validation the action performs.
    """

    def __init__(
        self,
        repository: BirthdayRepository,
        console: Console,
        *,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._repository = repository
        self._console = console
        self._clock = clock
        self._actions: dict[str, Callable[[date], None]] = {
            CHOICE_ADD: self.add_birthday,
            CHOICE_LIST_ALL: self.show_all,
            CHOICE_UPCOMING: self.show_upcoming,
            CHOICE_TODAY: self.show_today,
            CHOICE_MISSED: self.show_missed,
            CHOICE_DELETE: self.delete_birthday,
            CHOICE_EDIT: self.edit_birthday,
        }

    def run(self) -> None:
        self._console.print(WELCOME_TEXT)
        self._console.print()
        self.show_upcoming(self._clock(), first_run=True)

        while True:
            self._console.print(_render_menu())
            choice = self._console.prompt("Choose an action: ").strip()
            self._console.clear()
            if not self.handle_choice(choice, self._clock()):
                return

    def handle_choice(self, choice: str, today: date) -> bool:
        LOGGER.debug("Menu choice %r on %s", choice, today.isoformat())
        if choice == CHOICE_EXIT:
            self._console.print("Goodbye!")
            return False

        action = self._actions.get(choice)
        if action is None:
            self._console.print("Invalid choice. Please try again.")
            return True

        action(today)
        return True

    def add_birthday(self, today: date) -> None:
        self._console.print("Adding a new birthday")
        name = self._ask_name()
        birth_date = self._ask_birth_date(today, "Enter birth date (YYYY-MM-DD): ")

        self._repository.insert(name, birth_date)
        self._console.print("\nRecord added.")

    def show_all(self, today: date) -> None:
        self._show_all()

    def _show_all(self) -> list[BirthdayPerson]:
        persons = self._repository.list_all()
        if not persons:
            self._console.print("The birthday list is empty.")
            return persons

        self._console.print("All birthdays:")
        for line in _render_all_lines(persons):
            self._console.print(line)
        return persons

    def show_upcoming(self, today: date, *, first_run: bool = False) -> None:
        todays = self._repository.today(today)
        upcoming = self._repository.upcoming(today)

        if todays:
            with self._console.highlight("green"):
                self._console.print("\nCelebrating today:")
                for line in _render_today_lines(todays):
                    self._console.print(line)

        if upcoming:
            if not first_run or not todays:
                self._console.print("\nUpcoming birthdays:")
            for line in _render_upcoming_lines(upcoming):
                self._console.print(line)
        elif not todays:
            self._console.print("\nNo upcoming birthdays found.")

    def show_today(self, today: date) -> None:
        todays = self._repository.today(today)
        if not todays:
            self._console.print("Nobody has a birthday today.")
            return

        with self._console.highlight("green"):
            self._console.print("\nToday's birthdays:")
            for line in _render_today_lines(todays):
                self._console.print(line)

    def show_missed(self, today: date) -> None:
        missed = self._repository.missed(today)
        if not missed:
            self._console.print("No missed birthdays this year.")
            return

        with self._console.highlight("red"):
            self._console.print("\nMissed birthdays:")
            for line in _render_missed_lines(missed):
                self._console.print(line)

    def delete_birthday(self, today: date) -> None:
        persons = self._show_all()
        if not persons:
            return

        person_id = self._ask_record_id("Enter the ID of the record to delete: ")
        if person_id is None:
            return

        answer = self._console.prompt(f"Do you really want to delete record {person_id}? (y/n): ")
        if answer.strip().lower() != "y":
            self._console.print("\nDeletion cancelled.")
            return

        self._repository.delete(person_id)
        if any(person.id == person_id for person in persons):
            self._console.print("\nRecord deleted.")
        else:
            LOGGER.info("Delete requested for unknown id=%s", person_id)
            self._console.print(f"\nNo record with ID {person_id}; nothing was deleted.")

    def edit_birthday(self, today: date) -> None:
        persons = self._show_all()
        if not persons:
            return

        person_id = self._ask_record_id("Enter the ID of the record to edit: ")
        if person_id is None:
            return

        current = next((person for person in persons if person.id == person_id), None)
        if current is None:
            LOGGER.info("Edit requested for unknown id=%s", person_id)
            self._console.print("\nNo record with that ID was found!")
            return

        self._console.print(f"\nEditing record ID: {current.id}")
        self._console.print(f"Current name: {current.name}")
        new_name = self._console.prompt("New name (leave empty to keep the current one): ").strip()

        self._console.print(f"\nCurrent date: {format_full_date(current.birth_date)}")
        new_date = self._ask_birth_date(
            today,
            "New date (YYYY-MM-DD, leave empty to keep the current one): ",
            allow_blank=True,
        )

        updated = replace(
            current,
            name=new_name or current.name,
            birth_date=new_date or current.birth_date,
        )
        self._repository.update(updated)
        self._console.print("\nRecord updated.")

    def _ask_name(self) -> str:
        while True:
            raw = self._console.prompt("Enter name (cannot be empty): ")
            try:
                return parse_name(raw)
            except ValueError as exc:
                self._console.print(f"Error: {exc}!")

    def _ask_birth_date(self, today: date, prompt: str, *, allow_blank: bool = False) -> date | None:
        while True:
            raw = self._console.prompt(prompt)
            if allow_blank and not raw.strip():
                return None
            try:
                return parse_birth_date(raw, today)
            except InvalidBirthdayError as exc:
                self._console.print(f"Error: {exc}!")

    def _ask_record_id(self, prompt: str) -> int | None:
        while True:
            raw = self._console.prompt(prompt)
            try:
                return parse_record_id(raw)
            except ValueError as exc:
                self._console.print(f"Error: {exc}!")
