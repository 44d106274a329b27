from __future__ import annotations

import json
import re
from dataclasses import fields
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from domain.models import (
    AccountCredential,
    ApplicantProfile,
    AppConfig,
    FlowLimits,
    OperatingWindow,
    PacingPolicy,
    SearchPlan,
)
from infra.browser.playwright_session import DEFAULT_SEARCH_FILTERS


_REQUIRED_CONFIG_KEYS = {"LOGIN_EMAIL", "LOGIN_PASSWORD", "search_terms", "location"}
_REQUIRED_PROFILE_KEYS = {"email", "phone", "phone_country"}
_PLACEHOLDER_PATTERN = re.compile(r"^YOUR_", re.IGNORECASE)
_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_PHONE_PATTERN = re.compile(r"^\+?[\d\s\-()]{7,}$")


class FileSystemConfigProvider:
    """Reads config.json and profile.json from a config directory.

    Every public method re-reads from disk so that edits
    to the JSON files take effect without restarting the app.

    ``config.json`` holds the login credentials, the search plan, the
    operating window and run limits; ``profile.json`` holds the values
    typed into the quick-apply wizard.
    """

    def __init__(self, config_dir: str) -> None:
        self._config_dir = Path(config_dir)

    def validate(self) -> list[str]:
        errors: list[str] = []
        config_data = self._validate_json_file(
            self._config_dir / "config.json", _REQUIRED_CONFIG_KEYS, errors,
        )
        profile_data = self._validate_json_file(
            self._config_dir / "profile.json", _REQUIRED_PROFILE_KEYS, errors,
        )

        if config_data is not None:
            errors.extend(self._validate_config_formats(config_data))
        if profile_data is not None:
            errors.extend(self._validate_profile_formats(profile_data))
        return errors

    @staticmethod
    def _validate_config_formats(data: dict) -> list[str]:
        errors: list[str] = []
        email = str(data.get("LOGIN_EMAIL", ""))
        if _PLACEHOLDER_PATTERN.search(email):
            errors.append("LOGIN_EMAIL is a placeholder. Set the email you sign in with.")
        elif not _EMAIL_PATTERN.match(email):
            errors.append(f"LOGIN_EMAIL '{email}' is not a valid email address.")

        password = str(data.get("LOGIN_PASSWORD", ""))
        if not password or _PLACEHOLDER_PATTERN.search(password):
            errors.append("LOGIN_PASSWORD is a placeholder. Set your real password.")

        terms = data.get("search_terms")
        if (
            not isinstance(terms, list)
            or not terms
            or not all(isinstance(t, str) and t.strip() for t in terms)
        ):
            errors.append("search_terms must be a non-empty list of strings.")

        if not str(data.get("location", "")).strip():
            errors.append("location must not be empty.")

        filters = data.get("search_filters")
        if filters is not None and not isinstance(filters, dict):
            errors.append("search_filters must be an object of query parameters.")

        window = data.get("operating_window", {})
        if not isinstance(window, dict):
            errors.append("operating_window must be an object.")
        else:
            errors.extend(_validate_window(window))

        delays = data.get("cycle_delay_minutes")
        if delays is not None and not _is_ordered_pair(delays, low=1):
            errors.append("cycle_delay_minutes must be [min, max] with 1 <= min <= max.")

        for key in ("off_hours_recheck_minutes", "max_wizard_steps"):
            value = data.get(key)
            if value is not None and (not _is_int(value) or value < 1):
                errors.append(f"{key} must be a positive integer.")

        pacing = data.get("pacing")
        if pacing is not None:
            errors.extend(_validate_pacing(pacing))

        headless = data.get("headless")
        if headless is not None and not isinstance(headless, bool):
            errors.append("headless must be a boolean (true/false), not a string.")

        return errors

    @staticmethod
    def _validate_profile_formats(data: dict) -> list[str]:
        errors: list[str] = []
        email = str(data.get("email", ""))
        if not _EMAIL_PATTERN.match(email):
            errors.append(f"profile.json: email '{email}' is not a valid email address.")
        elif email == "your@email.com":
            errors.append("profile.json: email is a placeholder. Enter your real email.")

        phone = str(data.get("phone", ""))
        if not _PHONE_PATTERN.match(phone):
            errors.append(f"profile.json: phone '{phone}' is not a valid phone number.")

        if not str(data.get("phone_country", "")).strip():
            errors.append("profile.json: phone_country must match the option label, e.g. 'United Kingdom (+44)'.")

        return errors

    def get_config(self) -> AppConfig:
        data = self._read_json("config.json")
        window = data.get("operating_window", {})
        weekdays = window.get("weekdays", [1, 5])
        hours = window.get("hours", [8, 16])
        delays = data.get("cycle_delay_minutes", [30, 60])
        return AppConfig(
            credential=AccountCredential(
                email=data["LOGIN_EMAIL"],
                password=data["LOGIN_PASSWORD"],
            ),
            profile=self.get_profile(),
            search=SearchPlan(
                search_terms=data["search_terms"],
                location=data["location"],
                filters=data.get("search_filters", DEFAULT_SEARCH_FILTERS),
                cycle_delay_min_minutes=delays[0],
                cycle_delay_max_minutes=delays[1],
                off_hours_recheck_minutes=data.get("off_hours_recheck_minutes", 30),
            ),
            window=OperatingWindow(
                timezone=window.get("timezone", "Europe/London"),
                first_weekday=weekdays[0],
                last_weekday=weekdays[1],
                start_hour=hours[0],
                end_hour=hours[1],
            ),
            limits=FlowLimits(max_wizard_steps=data.get("max_wizard_steps", 25)),
            pacing=PacingPolicy(**data.get("pacing", {})),
            base_url=data.get("base_url", "https://www.linkedin.com"),
            headless=bool(data.get("headless", False)),
        )

    def get_profile(self) -> ApplicantProfile:
        data = self._read_json("profile.json")
        return ApplicantProfile(
            email=data["email"],
            phone=str(data["phone"]),
            phone_country=data["phone_country"],
        )

    # -- internal helpers ---------------------------------------------------

    def _read_json(self, filename: str) -> dict:
        path = self._config_dir / filename
        return json.loads(path.read_text(encoding="utf-8"))

    @staticmethod
    def _validate_json_file(
        path: Path,
        required_keys: set[str],
        errors: list[str],
    ) -> dict | None:
        """Validate a JSON file exists and has required keys.

        Returns the parsed dict on success, or None if the file
        is missing or unparseable.
        """
        if not path.is_file():
            errors.append(f"Missing file: {path}")
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            errors.append(f"Cannot read {path}: {exc}")
            return None
        missing = required_keys - set(data.keys())
        if missing:
            errors.append(f"{path.name} missing keys: {', '.join(sorted(missing))}")
            return None
        return data


def _validate_window(window: dict) -> list[str]:
    errors: list[str] = []
    tz = window.get("timezone", "Europe/London")
    try:
        ZoneInfo(str(tz))
    except (ZoneInfoNotFoundError, ValueError):
        errors.append(f"operating_window.timezone '{tz}' is not a known time zone.")

    weekdays = window.get("weekdays", [1, 5])
    if not _is_ordered_pair(weekdays, low=1, high=7):
        errors.append("operating_window.weekdays must be [first, last] with 1 <= first <= last <= 7.")

    hours = window.get("hours", [8, 16])
    if not _is_ordered_pair(hours, low=0, high=24) or hours[0] == hours[1]:
        errors.append("operating_window.hours must be [start, end] with 0 <= start < end <= 24.")
    return errors


def _validate_pacing(pacing: Any) -> list[str]:
    if not isinstance(pacing, dict):
        return ["pacing must be an object of millisecond delays."]
    errors: list[str] = []
    known = {f.name for f in fields(PacingPolicy)}
    for key, value in pacing.items():
        if key not in known:
            errors.append(f"pacing.{key} is not a known delay; expected one of: {', '.join(sorted(known))}.")
        elif not _is_int(value) or value < 0:
            errors.append(f"pacing.{key} must be a non-negative integer (milliseconds).")
    if not errors:
        policy = PacingPolicy(**pacing)
        if policy.think_min_ms > policy.think_max_ms:
            errors.append("pacing.think_min_ms must not exceed pacing.think_max_ms.")
    return errors


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_ordered_pair(value: Any, *, low: int, high: int | None = None) -> bool:
    if not isinstance(value, list) or len(value) != 2 or not all(_is_int(v) for v in value):
        return False
    first, last = value
    if high is not None and last > high:
        return False
    return low <= first <= last
