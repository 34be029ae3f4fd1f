from __future__ import annotations

import os
import tempfile
import tomllib
from pathlib import Path

from birthday_keeper.date_logic import LEAP_DAY_RULES
from birthday_keeper.models import DEFAULT_LEAP_DAY_RULE, DEFAULT_UPCOMING_LIMIT, AppConfig


def default_config() -> AppConfig:
    return AppConfig(leap_day_rule=DEFAULT_LEAP_DAY_RULE, upcoming_limit=DEFAULT_UPCOMING_LIMIT)


def validate_config(config: AppConfig) -> AppConfig:
    leap_day_rule = config.leap_day_rule.strip().lower()
    if leap_day_rule not in LEAP_DAY_RULES:
        raise ValueError(f"leap_day_rule must be one of {sorted(LEAP_DAY_RULES)}")

    if isinstance(config.upcoming_limit, bool) or not isinstance(config.upcoming_limit, int):
        raise ValueError("upcoming_limit must be an integer")
    if config.upcoming_limit < 1:
        raise ValueError("upcoming_limit must be a positive integer")

    return AppConfig(leap_day_rule=leap_day_rule, upcoming_limit=config.upcoming_limit)


def load_config(path: Path) -> AppConfig:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("rb") as file_obj:
        data = tomllib.load(file_obj)

    config = AppConfig(
        leap_day_rule=str(data.get("leap_day_rule", DEFAULT_LEAP_DAY_RULE)),
        upcoming_limit=data.get("upcoming_limit", DEFAULT_UPCOMING_LIMIT),
    )
    return validate_config(config)


def render_config(config: AppConfig) -> str:
    validated = validate_config(config)

    lines = [
        "# How Feb 29 birthdays are shown in non-leap years: feb28 or mar1.",
        f'leap_day_rule = "{validated.leap_day_rule}"',
        "",
        "# How many entries the upcoming birthdays view shows.",
        f"upcoming_limit = {validated.upcoming_limit}",
    ]
    return "\n".join(lines) + "\n"


def save_config_atomic(path: Path, config: AppConfig) -> None:
    rendered = render_config(config)
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding="utf-8",
        dir=path.parent,
        prefix=f".{path.name}.",
        delete=False,
    ) as temp_file:
        temp_file.write(rendered)
        temp_name = temp_file.name

    os.replace(temp_name, path)


def ensure_default_config(path: Path) -> None:
    if path.exists():
        return
    save_config_atomic(path, default_config())
