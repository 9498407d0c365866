"""Group standings modules."""

from domain.standings.calculator import (
    MatchDetail,
    StandingsAccumulator,
    StandingsRow,
    calculate_standings,
)
from domain.standings.scoring import ScoringStrategy, italian_points
from domain.standings.season import SeasonPlayerSummary, summarize_season

__all__ = [
    "MatchDetail",
    "ScoringStrategy",
    "SeasonPlayerSummary",
    "StandingsAccumulator",
    "StandingsRow",
    "calculate_standings",
    "italian_points",
    "summarize_season",
]
