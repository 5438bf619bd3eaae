"""Field-level and cross-field validation for every record kind.

Validators are pure: related records (the competition a score belongs
to, today's date) are loaded by the service layer and passed in. Each
validator checks *all* fields and returns a :class:`ValidationResult`
holding every violation plus the coerced values, so a write is either
fully valid or rejected as a whole.

Input coercion accepts what spreadsheets and the CLI produce: ISO date
strings, numeric strings, ``"true"``/``"false"``.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any

from scorectl.domain.lifecycle import (
    MAX_CONTESTANT_AGE,
    MIN_CONTESTANT_AGE,
    is_eligible_age,
    within_scoring_window,
)
from scorectl.domain.roles import is_valid_role

# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldError:
    """One violated constraint."""

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one record.

    ``values`` holds the coerced field values and is only meaningful
    when ``valid`` is True.
    """

    valid: bool
    errors: list[FieldError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    values: dict[str, Any] = field(default_factory=dict)

    @property
    def messages(self) -> list[str]:
        return [e.message for e in self.errors]


# ---------------------------------------------------------------------------
# Coercion
# ---------------------------------------------------------------------------

_TRUE_STRINGS = frozenset({"true", "1", "yes", "y", "active"})
_FALSE_STRINGS = frozenset({"false", "0", "no", "n", "inactive"})


def parse_date(value: Any) -> date:
    """Coerce *value* to a ``date``.

    Raises:
        ValueError: If the value cannot be read as a date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if len(text) > 10:
            return datetime.fromisoformat(text).date()
        return date.fromisoformat(text)
    msg = f"Not a date: {value!r}"
    raise ValueError(msg)


def parse_datetime(value: Any) -> datetime:
    """Coerce *value* to a naive local ``datetime``.

    Bare dates become midnight; aware datetimes are converted to local time.

    Raises:
        ValueError: If the value cannot be read as a datetime.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value.strip())
    else:
        msg = f"Not a datetime: {value!r}"
        raise ValueError(msg)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_number(value: Any) -> float:
    """Coerce *value* to a finite float.

    Raises:
        ValueError: On booleans, non-numeric strings, NaN or infinity.
    """
    if isinstance(value, bool):
        msg = f"Not a number: {value!r}"
        raise ValueError(msg)
    number = float(value)
    if not math.isfinite(number):
        msg = f"Not a finite number: {value!r}"
        raise ValueError(msg)
    return number


def parse_int(value: Any) -> int:
    """Coerce *value* to an int; floats must be whole numbers.

    Raises:
        ValueError: If the value is not a whole number.
    """
    number = parse_number(value)
    if not number.is_integer():
        msg = f"Not a whole number: {value!r}"
        raise ValueError(msg)
    return int(number)


def parse_bool(value: Any) -> bool:
    """Coerce *value* to a bool.

    Raises:
        ValueError: If a string is not a recognised boolean word.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    msg = f"Not a boolean: {value!r}"
    raise ValueError(msg)


# ---------------------------------------------------------------------------
# Field checker
# ---------------------------------------------------------------------------


def _label(field_name: str) -> str:
    return field_name.replace("_", " ").capitalize()


def _fmt(number: float) -> str:
    return str(int(number)) if float(number).is_integer() else str(number)


class _FieldChecker:
    """Collects coerced values and violations for one record."""

    def __init__(self, data: Mapping[str, Any]) -> None:
        self._data = data
        self.errors: list[FieldError] = []
        self.values: dict[str, Any] = {}

    def fail(self, field_name: str, message: str) -> None:
        self.errors.append(FieldError(field_name, message))

    def _raw(self, field_name: str, *, strip: bool = True) -> Any:
        value = self._data.get(field_name)
        if isinstance(value, str) and strip:
            value = value.strip()
        if value is None or value == "":
            return None
        return value

    def _missing(self, field_name: str, required: bool) -> None:
        self.values[field_name] = None
        if required:
            self.fail(field_name, f"{_label(field_name)} is required")

    def text(
        self,
        field_name: str,
        *,
        required: bool = False,
        min_len: int = 0,
        max_len: int | None = None,
        strip: bool = True,
    ) -> str | None:
        raw = self._raw(field_name, strip=strip)
        if raw is None:
            self._missing(field_name, required)
            return None
        value = str(raw)
        if len(value) < min_len or (max_len is not None and len(value) > max_len):
            if max_len is not None and min_len > 0:
                message = f"must be between {min_len} and {max_len} characters"
            elif max_len is not None:
                message = f"must not exceed {max_len} characters"
            else:
                message = f"must be at least {min_len} characters"
            self.fail(field_name, f"{_label(field_name)} {message}")
        self.values[field_name] = value
        return value

    def date(self, field_name: str, *, required: bool = False) -> date | None:
        raw = self._raw(field_name)
        if raw is None:
            self._missing(field_name, required)
            return None
        try:
            value = parse_date(raw)
        except (TypeError, ValueError):
            self.fail(field_name, f"{_label(field_name)} must be a valid date")
            self.values[field_name] = None
            return None
        self.values[field_name] = value
        return value

    def datetime(self, field_name: str, *, required: bool = False) -> datetime | None:
        raw = self._raw(field_name)
        if raw is None:
            self._missing(field_name, required)
            return None
        try:
            value = parse_datetime(raw)
        except (TypeError, ValueError):
            self.fail(field_name, f"{_label(field_name)} must be a valid date and time")
            self.values[field_name] = None
            return None
        self.values[field_name] = value
        return value

    def _bounded(
        self,
        field_name: str,
        value: float,
        minimum: float | None,
        maximum: float | None,
    ) -> None:
        if (minimum is not None and value < minimum) or (maximum is not None and value > maximum):
            if minimum is not None and maximum is not None:
                message = f"must be between {_fmt(minimum)} and {_fmt(maximum)}"
            elif minimum is not None:
                message = f"must be at least {_fmt(minimum)}"
            else:
                message = f"must not exceed {_fmt(maximum)}"  # type: ignore[arg-type]
            self.fail(field_name, f"{_label(field_name)} {message}")

    def number(
        self,
        field_name: str,
        *,
        required: bool = False,
        minimum: float | None = None,
        maximum: float | None = None,
    ) -> float | None:
        raw = self._raw(field_name)
        if raw is None:
            self._missing(field_name, required)
            return None
        try:
            value = parse_number(raw)
        except (TypeError, ValueError):
            self.fail(field_name, f"{_label(field_name)} must be a number")
            self.values[field_name] = None
            return None
        self._bounded(field_name, value, minimum, maximum)
        self.values[field_name] = value
        return value

    def integer(
        self,
        field_name: str,
        *,
        required: bool = False,
        minimum: int | None = None,
        maximum: int | None = None,
    ) -> int | None:
        raw = self._raw(field_name)
        if raw is None:
            self._missing(field_name, required)
            return None
        try:
            value = parse_int(raw)
        except (TypeError, ValueError):
            self.fail(field_name, f"{_label(field_name)} must be a whole number")
            self.values[field_name] = None
            return None
        self._bounded(field_name, value, minimum, maximum)
        self.values[field_name] = value
        return value

    def boolean(self, field_name: str, *, default: bool = True) -> bool:
        raw = self._raw(field_name)
        if raw is None:
            self.values[field_name] = default
            return default
        try:
            value = parse_bool(raw)
        except ValueError:
            self.fail(field_name, f"{_label(field_name)} must be true or false")
            value = default
        self.values[field_name] = value
        return value

    def result(self) -> ValidationResult:
        return ValidationResult(
            valid=not self.errors,
            errors=list(self.errors),
            values=dict(self.values),
        )


# ---------------------------------------------------------------------------
# Record validators
# ---------------------------------------------------------------------------


def validate_supervisor(data: Mapping[str, Any], *, today: date) -> ValidationResult:
    """Validate a full supervisor record."""
    c = _FieldChecker(data)
    c.text("name", required=True, min_len=2, max_len=100)
    hire_date = c.date("hire_date", required=True)
    if hire_date is not None and hire_date > today:
        c.fail("hire_date", "Hire date cannot be in the future")
    c.text("department", required=True)
    c.text("qualification", required=True)
    c.text("employee_id")
    c.boolean("is_active")
    c.integer("max_contestants", required=True, minimum=1, maximum=50)
    c.text("notes")
    return c.result()


def validate_contestant(
    data: Mapping[str, Any], *, today: date, check_age: bool = True
) -> ValidationResult:
    """Validate a full contestant record.

    Age is checked by calendar-year subtraction against *today*. Updates that
    leave ``birth_date`` untouched pass ``check_age=False``.
    """
    c = _FieldChecker(data)
    c.text("name", required=True, min_len=2, max_len=100)
    birth_date = c.date("birth_date", required=True)
    if check_age and birth_date is not None and not is_eligible_age(birth_date, today):
        c.fail(
            "birth_date",
            f"Age must be between {MIN_CONTESTANT_AGE} and {MAX_CONTESTANT_AGE} years",
        )
    c.text("address", max_len=200)
    c.text("education_level", required=True)
    c.text("registration_number")
    c.boolean("is_active")
    c.integer("supervisor_id", minimum=1)
    c.text("notes")
    return c.result()


def validate_competition(data: Mapping[str, Any]) -> ValidationResult:
    """Validate a full competition record, including the window and score thresholds."""
    c = _FieldChecker(data)
    c.text("title", required=True, min_len=3, max_len=150)
    c.text("description", max_len=1000)
    start_date = c.date("start_date", required=True)
    end_date = c.date("end_date", required=True)
    if start_date is not None and end_date is not None and end_date <= start_date:
        c.fail("end_date", "End date must be after the start date")
    max_score = c.number("max_score", required=True, minimum=0, maximum=100)
    passing_score = c.number("passing_score", required=True, minimum=0, maximum=100)
    if max_score is not None and passing_score is not None and passing_score >= max_score:
        c.fail("passing_score", "Passing score must be less than the maximum score")
    c.integer("max_contestants", required=True, minimum=1)
    c.text("notes")
    return c.result()


def validate_score(
    data: Mapping[str, Any],
    *,
    competition: Mapping[str, Any] | None = None,
    check_window: bool = True,
) -> ValidationResult:
    """Validate a full score record.

    When *competition* is given, the value is capped by its ``max_score``
    and, unless *check_window* is off, the entry date must fall inside its
    scoring window.
    """
    c = _FieldChecker(data)
    c.integer("competition_id", required=True, minimum=1)
    c.integer("contestant_id", required=True, minimum=1)
    c.integer("supervisor_id", required=True, minimum=1)
    value = c.number("score_value", required=True, minimum=0, maximum=100)
    if value is not None:
        c.values["score_value"] = round(value, 2)
        if competition is not None and value > float(competition["max_score"]):
            c.fail(
                "score_value",
                f"Score exceeds the competition maximum of {_fmt(competition['max_score'])}",
            )
    entry_date = c.datetime("entry_date", required=True)
    if (
        check_window
        and competition is not None
        and entry_date is not None
        and not within_scoring_window(
            entry_date, competition["start_date"], competition["end_date"]
        )
    ):
        c.fail("entry_date", "Entry date must fall within the competition period")
    c.text("notes", max_len=500)
    return c.result()


def validate_user(
    data: Mapping[str, Any],
    *,
    require_password: bool = True,
) -> ValidationResult:
    """Validate an account record. The password is checked only when required."""
    c = _FieldChecker(data)
    c.text("username", required=True, min_len=3, max_len=50)
    if require_password:
        c.text("password", required=True, strip=False)
    role = c.text("role", required=True)
    if role is not None and not is_valid_role(role):
        c.fail("role", f"Unknown role: {role!r}")
    c.text("full_name", required=True)
    c.boolean("is_active")
    return c.result()
