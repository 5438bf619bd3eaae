"""Time-derived state: competition status, scoring windows, and age.

Competition status is never stored. It is a pure function of today's
date and the competition's [start_date, end_date] range, recomputed on
every read, so it can never go stale between saves.
"""

from __future__ import annotations

from datetime import date, datetime, time

from scorectl.domain.types import CompetitionStatus

MIN_CONTESTANT_AGE = 5
MAX_CONTESTANT_AGE = 25

END_OF_DAY = time(23, 59, 59)


def derive_competition_status(start_date: date, end_date: date, today: date) -> str:
    """Compute competition status for *today*.

    ``upcoming`` before the start date, ``ended`` after the end date,
    ``ongoing`` otherwise (both boundary days count as ongoing).
    """
    if today < start_date:
        return str(CompetitionStatus.UPCOMING)
    if today > end_date:
        return str(CompetitionStatus.ENDED)
    return str(CompetitionStatus.ONGOING)


def is_ongoing(start_date: date, end_date: date, today: date) -> bool:
    return derive_competition_status(start_date, end_date, today) == CompetitionStatus.ONGOING


def scoring_window(start_date: date, end_date: date) -> tuple[datetime, datetime]:
    """Return the inclusive entry window: start of the first day to 23:59:59 of the last."""
    return datetime.combine(start_date, time.min), datetime.combine(end_date, END_OF_DAY)


def within_scoring_window(entry: datetime, start_date: date, end_date: date) -> bool:
    opens, closes = scoring_window(start_date, end_date)
    return opens <= entry <= closes


def age_in_years(birth_date: date, today: date) -> int:
    """Age by calendar-year subtraction.

    Day and month are ignored, so a contestant counts as N for the whole
    calendar year of their Nth birthday.
    """
    return today.year - birth_date.year


def is_eligible_age(birth_date: date, today: date) -> bool:
    return MIN_CONTESTANT_AGE <= age_in_years(birth_date, today) <= MAX_CONTESTANT_AGE
