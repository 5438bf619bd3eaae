"""Statistics derived from loaded score values.

Nothing here touches storage. Callers pass in the live (not soft-deleted)
values; empty inputs yield zeros rather than errors.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal


def round2(value: float) -> float:
    """Round half-up to two decimal places (75.125 -> 75.13)."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def mean_score(values: Iterable[float]) -> float:
    """Mean rounded to two decimals; 0 when there are no values."""
    items = list(values)
    if not items:
        return 0.0
    return round2(sum(items) / len(items))


def is_passing(score_value: float, passing_score: float) -> bool:
    return score_value >= passing_score


def rank_of(score_value: float, competition_values: Iterable[float]) -> int:
    """Competition rank: one plus the count of strictly greater values.

    Ties share a rank and the following rank is skipped (1, 2, 2, 4).
    """
    return 1 + sum(1 for other in competition_values if other > score_value)


@dataclass(frozen=True)
class CompetitionStats:
    total_contestants: int
    passed_count: int
    failed_count: int
    average_score: float
    success_rate: float

    def to_dict(self) -> dict[str, float | int]:
        return asdict(self)


@dataclass(frozen=True)
class SupervisorStats:
    contestants_count: int
    scores_count: int
    average_score: float
    available_slots: int

    def to_dict(self) -> dict[str, float | int]:
        return asdict(self)


def competition_statistics(values: Sequence[float], passing_score: float) -> CompetitionStats:
    """Summarise one competition's scores.

    ``failed_count`` is always ``total_contestants - passed_count``.
    """
    total = len(values)
    passed = sum(1 for v in values if is_passing(v, passing_score))
    success_rate = round2(passed / total * 100) if total else 0.0
    return CompetitionStats(
        total_contestants=total,
        passed_count=passed,
        failed_count=total - passed,
        average_score=mean_score(values),
        success_rate=success_rate,
    )


def supervisor_statistics(
    *,
    contestants_count: int,
    max_contestants: int,
    score_values: Sequence[float],
) -> SupervisorStats:
    """Summarise one supervisor's load and the scores of their contestants."""
    return SupervisorStats(
        contestants_count=contestants_count,
        scores_count=len(score_values),
        average_score=mean_score(score_values),
        available_slots=max_contestants - contestants_count,
    )
