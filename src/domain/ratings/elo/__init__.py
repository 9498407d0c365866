"""Elo rating modules."""

from domain.ratings.elo.calculator import (
    EloParameters,
    EloRatingResult,
    PlayerEloCalculator,
    PlayerEloEvent,
    PlayerRating,
    RatedMatch,
    calculate_expected_score,
    get_k_factor,
    process_all_matches,
)
from domain.ratings.elo.config import EloSystemConfig, load_elo_system_configs

__all__ = [
    "EloParameters",
    "EloRatingResult",
    "EloSystemConfig",
    "PlayerEloCalculator",
    "PlayerEloEvent",
    "PlayerRating",
    "RatedMatch",
    "calculate_expected_score",
    "get_k_factor",
    "load_elo_system_configs",
    "process_all_matches",
]
