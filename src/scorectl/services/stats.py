"""StatsService — derived aggregates, computed on read and never stored."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from scorectl.domain.aggregates import (
    CompetitionStats,
    SupervisorStats,
    competition_statistics,
    mean_score,
    rank_of,
    supervisor_statistics,
)
from scorectl.services._helpers import not_found
from scorectl.services.base import BaseService
from scorectl.services.contracts import (
    AverageResultData,
    CompetitionStatsData,
    RankResultData,
    SupervisorStatsData,
    dump_validated,
)
from scorectl.services.result import ServiceResult
from scorectl.services.telemetry import traced

if TYPE_CHECKING:
    from scorectl.infrastructure.repositories.records import RecordRepository


def competition_stats_for(
    records: RecordRepository,
    competition: dict[str, Any],
) -> CompetitionStats:
    values = records.competition_score_values(competition["id"])
    return competition_statistics(values, float(competition["passing_score"]))


def supervisor_stats_for(records: RecordRepository, supervisor: dict[str, Any]) -> SupervisorStats:
    return supervisor_statistics(
        contestants_count=records.count_supervisor_contestants(supervisor["id"]),
        max_contestants=int(supervisor["max_contestants"]),
        score_values=records.supervisor_score_values(supervisor["id"]),
    )


class StatsService(BaseService):
    """Statistics over live scores."""

    @traced
    def competition_statistics(self, competition_id: int) -> ServiceResult:
        op = "competition_statistics"
        competition = self._records.get_competition(competition_id)
        if competition is None:
            return not_found(op, "competition", competition_id)

        stats = competition_stats_for(self._records, competition)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "competition_id": competition_id,
                **dump_validated(CompetitionStatsData, stats.to_dict()),
            },
        )

    @traced
    def supervisor_statistics(self, supervisor_id: int) -> ServiceResult:
        op = "supervisor_statistics"
        supervisor = self._records.get_supervisor(supervisor_id)
        if supervisor is None:
            return not_found(op, "supervisor", supervisor_id)

        stats = supervisor_stats_for(self._records, supervisor)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "supervisor_id": supervisor_id,
                **dump_validated(SupervisorStatsData, stats.to_dict()),
            },
        )

    @traced
    def contestant_average(self, contestant_id: int) -> ServiceResult:
        """Mean of the contestant's live scores, 0 when there are none."""
        op = "contestant_average"
        if self._records.get_contestant(contestant_id) is None:
            return not_found(op, "contestant", contestant_id)

        values = self._records.contestant_score_values(contestant_id)
        data = {
            "contestant_id": contestant_id,
            "average_score": mean_score(values),
            "score_count": len(values),
        }
        return ServiceResult(ok=True, op=op, data=dump_validated(AverageResultData, data))

    @traced
    def score_rank(self, score_id: int) -> ServiceResult:
        """Rank of a score within its competition (ties share a rank)."""
        op = "score_rank"
        score = self._records.get_score(score_id)
        if score is None:
            return not_found(op, "score", score_id)

        values = self._records.competition_score_values(score["competition_id"])
        data = {
            "score_id": score_id,
            "competition_id": score["competition_id"],
            "rank": rank_of(float(score["score_value"]), values),
            "out_of": len(values),
        }
        return ServiceResult(ok=True, op=op, data=dump_validated(RankResultData, data))
