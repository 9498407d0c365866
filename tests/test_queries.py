"""Tests for read-side helpers over an Elo run."""

from __future__ import annotations

from datetime import date

import pytest

from domain.common import Match
from domain.ratings.elo.calculator import EloParameters, process_all_matches
from domain.ratings.elo.queries import calculate_stats, get_match_details, get_player, get_player_matches


def _matches() -> list[Match]:
    return [
        Match(id="m1", date=date(2024, 5, 12), team1=("A", "B"), team2=("C", "D"), score=(15, 10)),
        Match(id="m2", date=date(2024, 5, 12), team1=("A", "C"), team2=("E", "F"), score=(13, 15)),
    ]


def test_get_player() -> None:
    result = process_all_matches(_matches())

    player = get_player(result.players, "A")
    assert player is not None
    assert player.games_played == 2
    assert get_player(result.players, "Z") is None


def test_get_player_matches() -> None:
    result = process_all_matches(_matches())

    assert [rated.match.id for rated in get_player_matches(result.matches, "A")] == ["m1", "m2"]
    assert [rated.match.id for rated in get_player_matches(result.matches, "E")] == ["m2"]
    assert get_player_matches(result.matches, "Z") == []


def test_match_details_from_each_side() -> None:
    result = process_all_matches(_matches())
    first = result.matches[0]

    details = get_match_details(first, "D")
    assert details.partner == "C"
    assert details.opponents == ("A", "B")
    assert details.player_won is False
    assert (details.player_score, details.opponent_score) == (10, 15)
    assert details.rating_change == -20

    details = get_match_details(first, "B")
    assert details.partner == "A"
    assert details.player_won is True
    assert (details.player_score, details.opponent_score) == (15, 10)
    assert details.rating_change == 20


def test_match_details_require_a_participant() -> None:
    result = process_all_matches(_matches())

    with pytest.raises(ValueError, match="did not play"):
        get_match_details(result.matches[0], "E")


def test_calculate_stats() -> None:
    result = process_all_matches(_matches())
    stats = calculate_stats(result.players, result.matches)

    assert stats.total_games == 2
    assert stats.total_players == 6
    assert stats.average_rating == 1500
    assert stats.calibrated_players == 0

    calibrated = process_all_matches(_matches(), EloParameters(calibration_games=2))
    assert calculate_stats(calibrated.players, calibrated.matches).calibrated_players == 2


def test_calculate_stats_for_empty_run() -> None:
    stats = calculate_stats([], [])

    assert stats.total_games == 0
    assert stats.total_players == 0
    assert stats.average_rating == 0
    assert stats.calibrated_players == 0
