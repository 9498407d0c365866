"""Season-wide Italian-points totals, broken down by tournament stage."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from domain.common import Match
from domain.standings.calculator import MatchDetail
from domain.standings.scoring import italian_points

FINAL_STAGE_KEY = "final"


@dataclass
class StageTally:
    points: int = 0
    matches: list[MatchDetail] = field(default_factory=list)


@dataclass
class SeasonPlayerSummary:
    player_id: str
    stages: dict[str, StageTally] = field(default_factory=dict)
    total: int = 0


def _default_stage_key(match: Match) -> str:
    return match.tournament or FINAL_STAGE_KEY


def summarize_season(
    matches: Iterable[Match],
    *,
    stage_key: Callable[[Match], str] = _default_stage_key,
) -> list[SeasonPlayerSummary]:
    """Accumulate Italian points per player and stage over every season match.

    Playoff matches count as well. Players are sorted by season total,
    ties in first-encountered order.
    """
    summaries: dict[str, SeasonPlayerSummary] = {}

    for match in matches:
        key = stage_key(match)
        score1, score2 = match.score
        sides = (
            (match.team1, match.team2, score1, score2),
            (match.team2, match.team1, score2, score1),
        )
        for team, opponents, my_score, opponent_score in sides:
            points = italian_points(my_score, opponent_score)
            for index, player_id in enumerate(team):
                summary = summaries.setdefault(player_id, SeasonPlayerSummary(player_id=player_id))
                stage = summary.stages.setdefault(key, StageTally())
                stage.points += points
                stage.matches.append(
                    MatchDetail(
                        match_id=match.id,
                        partner=team[1 - index],
                        opponents=(opponents[0], opponents[1]),
                        score=(my_score, opponent_score),
                        won=my_score > opponent_score,
                        margin=abs(my_score - opponent_score),
                        points=points,
                    )
                )
                summary.total += points

    return sorted(summaries.values(), key=lambda summary: summary.total, reverse=True)


__all__ = ["FINAL_STAGE_KEY", "SeasonPlayerSummary", "StageTally", "summarize_season"]
