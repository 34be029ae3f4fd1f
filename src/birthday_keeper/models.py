from __future__ import annotations

from dataclasses import dataclass
from datetime import date


DEFAULT_LEAP_DAY_RULE = "feb28"
DEFAULT_UPCOMING_LIMIT = 5


@dataclass(frozen=True)
class BirthdayPerson:
    id: int | None
    name: str
    birth_date: date


@dataclass(frozen=True)
class AppConfig:
    leap_day_rule: str
    upcoming_limit: int


@dataclass(frozen=True)
class TodayBirthday:
    person: BirthdayPerson
    age: int


@dataclass(frozen=True)
class UpcomingBirthday:
    person: BirthdayPerson
    next_date: date
    days_until: int


@dataclass(frozen=True)
class MissedBirthday:
    person: BirthdayPerson
    occurrence: date
    days_since: int
