from __future__ import annotations

import calendar
from collections.abc import Iterable
from datetime import date

from birthday_keeper.models import BirthdayPerson, MissedBirthday, TodayBirthday, UpcomingBirthday

# (month, day) a Feb 29 birthday is celebrated on in a non-leap year.
LEAP_DAY_FALLBACKS = {
    "feb28": (2, 28),
    "mar1": (3, 1),
}
LEAP_DAY_RULES = set(LEAP_DAY_FALLBACKS)


class InvalidBirthdayError(ValueError):
    pass


def _month_day_in_year(birth_date: date, year: int, leap_day_rule: str) -> tuple[int, int]:
    if leap_day_rule not in LEAP_DAY_FALLBACKS:
        raise InvalidBirthdayError(f"Unsupported leap day rule: {leap_day_rule}")
    if (birth_date.month, birth_date.day) == (2, 29) and not calendar.isleap(year):
        return LEAP_DAY_FALLBACKS[leap_day_rule]
    return birth_date.month, birth_date.day


def occurrence_in_year(person: BirthdayPerson, year: int, leap_day_rule: str) -> date:
    """Project the stored birth date onto ``year``.

    Every query goes through this function, so a Feb 29 birthday lands on the
    same fallback day in today, upcoming and missed views alike.
    """
    month, day = _month_day_in_year(person.birth_date, year, leap_day_rule)
    return date(year, month, day)


def next_birthday(person: BirthdayPerson, today: date, leap_day_rule: str) -> date:
    """Nearest occurrence on or after ``today``; a birthday today is its own next one."""
    occurrence = occurrence_in_year(person, today.year, leap_day_rule)
    if occurrence < today:
        occurrence = occurrence_in_year(person, today.year + 1, leap_day_rule)
    return occurrence


def days_until_birthday(person: BirthdayPerson, today: date, leap_day_rule: str) -> int:
    return (next_birthday(person, today, leap_day_rule) - today).days


def days_since_birthday(person: BirthdayPerson, today: date, leap_day_rule: str) -> int:
    # Negative while this year's birthday is still ahead.
    return (today - occurrence_in_year(person, today.year, leap_day_rule)).days


def turning_age(person: BirthdayPerson, today: date) -> int:
    return today.year - person.birth_date.year


def todays_birthdays(
    persons: Iterable[BirthdayPerson], today: date, leap_day_rule: str
) -> list[TodayBirthday]:
    return [
        TodayBirthday(person=person, age=turning_age(person, today))
        for person in persons
        if occurrence_in_year(person, today.year, leap_day_rule) == today
    ]


def upcoming_birthdays(
    persons: Iterable[BirthdayPerson],
    today: date,
    leap_day_rule: str,
    limit: int = 5,
) -> list[UpcomingBirthday]:
    if limit <= 0:
        return []

    rows: list[UpcomingBirthday] = []
    for person in persons:
        next_date = next_birthday(person, today, leap_day_rule)
        rows.append(
            UpcomingBirthday(
                person=person,
                next_date=next_date,
                days_until=(next_date - today).days,
            )
        )

    # sorted() is stable, ties keep storage order
    rows.sort(key=lambda row: row.days_until)
    return rows[:limit]


def missed_birthdays(
    persons: Iterable[BirthdayPerson], today: date, leap_day_rule: str
) -> list[MissedBirthday]:
    rows: list[MissedBirthday] = []
    for person in persons:
        occurrence = occurrence_in_year(person, today.year, leap_day_rule)
        if occurrence < today:
            rows.append(
                MissedBirthday(
                    person=person,
                    occurrence=occurrence,
                    days_since=(today - occurrence).days,
                )
            )

    rows.sort(key=lambda row: row.occurrence, reverse=True)
    return rows
