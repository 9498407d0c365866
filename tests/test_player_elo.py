"""Unit tests for doubles player Elo calculations."""

from __future__ import annotations

from datetime import date

import pytest

from domain.common import Match
from domain.ratings.elo.calculator import (
    EloParameters,
    PlayerEloCalculator,
    calculate_expected_score,
    calculate_rating_change,
    calculate_team_rating,
    get_k_factor,
    process_all_matches,
    round_half_away_from_zero,
)


def _match(
    match_id: str,
    team1: tuple[str, str],
    team2: tuple[str, str],
    score: tuple[int, int],
    *,
    played_on: date = date(2024, 5, 12),
) -> Match:
    return Match(id=match_id, date=played_on, team1=team1, team2=team2, score=score)


def test_expected_score_is_half_for_equal_ratings() -> None:
    assert calculate_expected_score(1500.0, 1500.0) == pytest.approx(0.5)
    assert calculate_expected_score(1600.0, 1400.0) == pytest.approx(1.0 / (1.0 + 10.0 ** -0.5))
    assert calculate_team_rating(1520.0, 1480.0) == pytest.approx(1500.0)


def test_round_half_away_from_zero() -> None:
    assert round_half_away_from_zero(2.5) == 3
    assert round_half_away_from_zero(-2.5) == -3
    assert round_half_away_from_zero(0.4) == 0
    assert round_half_away_from_zero(-0.5) == -1
    assert round_half_away_from_zero(18.85) == 19


def test_k_factor_switches_after_calibration() -> None:
    assert get_k_factor(0) == pytest.approx(40.0)
    assert get_k_factor(14) == pytest.approx(40.0)
    assert get_k_factor(15) == pytest.approx(32.0)
    assert get_k_factor(100) == pytest.approx(32.0)

    custom = EloParameters(k_factor=24.0, calibration_k_factor=48.0, calibration_games=3)
    assert get_k_factor(2, custom) == pytest.approx(48.0)
    assert get_k_factor(3, custom) == pytest.approx(24.0)


def test_calculate_rating_change_for_new_players() -> None:
    assert calculate_rating_change(1500.0, 1500.0, True, 0) == 20
    assert calculate_rating_change(1500.0, 1500.0, False, 0) == -20
    assert calculate_rating_change(1500.0, 1500.0, True, 15) == 16


def test_first_match_between_new_players() -> None:
    result = process_all_matches([_match("m1", ("A", "B"), ("C", "D"), (15, 10))])

    ratings = {player.id: player.current_rating for player in result.players}
    assert ratings == {"A": 1520.0, "B": 1520.0, "C": 1480.0, "D": 1480.0}
    assert result.matches[0].rating_changes == {"A": 20, "B": 20, "C": -20, "D": -20}
    assert all(player.games_played == 1 for player in result.players)
    assert not any(player.is_calibrated for player in result.players)


def test_deltas_use_ratings_frozen_before_the_match() -> None:
    calculator = PlayerEloCalculator()
    calculator.process_match(_match("m1", ("A", "B"), ("C", "D"), (15, 10)))

    events = calculator.process_match(_match("m2", ("A", "C"), ("B", "D"), (15, 12)))
    deltas = {event.player_id: event.elo_delta for event in events}

    # Both team averages are 1500, so each player is measured against 1500.
    assert deltas == {"A": 19, "C": 21, "B": -21, "D": -19}
    assert {event.player_id: event.pre_elo for event in events} == {
        "A": 1520.0,
        "C": 1480.0,
        "B": 1520.0,
        "D": 1480.0,
    }
    assert calculator.get_rating("A") == pytest.approx(1539.0)
    assert calculator.get_rating("C") == pytest.approx(1501.0)
    assert calculator.get_rating("B") == pytest.approx(1499.0)
    assert calculator.get_rating("D") == pytest.approx(1461.0)


def test_event_fields_describe_each_player_side() -> None:
    calculator = PlayerEloCalculator()
    events = calculator.process_match(_match("m1", ("A", "B"), ("C", "D"), (13, 15)))

    by_player = {event.player_id: event for event in events}
    assert by_player["A"].partner_id == "B"
    assert by_player["A"].opponent_ids == ("C", "D")
    assert by_player["A"].won is False
    assert by_player["A"].actual_score == pytest.approx(0.0)
    assert by_player["D"].partner_id == "C"
    assert by_player["D"].won is True
    assert by_player["D"].expected_score == pytest.approx(0.5)
    assert by_player["D"].k_factor == pytest.approx(40.0)
    assert by_player["D"].games_played_pre == 0


def test_equal_teams_exchange_symmetric_deltas() -> None:
    result = process_all_matches([_match("m1", ("A", "B"), ("C", "D"), (21, 19))])

    changes = result.matches[0].rating_changes
    assert changes["A"] == -changes["C"]
    assert sum(changes.values()) == 0


def test_calibration_ends_after_fifteen_games() -> None:
    calculator = PlayerEloCalculator()
    k_factors: list[float] = []
    for index in range(17):
        score = (15, 12) if index % 2 == 0 else (12, 15)
        events = calculator.process_match(_match(f"m{index}", ("A", "B"), ("C", "D"), score))
        k_factors.append(next(event.k_factor for event in events if event.player_id == "A"))

    assert k_factors[:15] == [40.0] * 15
    assert k_factors[15:] == [32.0, 32.0]
    assert calculator.get_games_played("A") == 17

    leaderboard = calculator.leaderboard()
    assert all(player.is_calibrated for player in leaderboard)


def test_rating_history_starts_with_initial_snapshot() -> None:
    matches = [
        _match("m1", ("A", "B"), ("C", "D"), (15, 10), played_on=date(2024, 5, 12)),
        _match("m2", ("A", "E"), ("B", "C"), (9, 15), played_on=date(2024, 6, 9)),
    ]
    result = process_all_matches(matches)
    players = {player.id: player for player in result.players}

    history_a = players["A"].rating_history
    assert len(history_a) == 3
    assert history_a[0].date == date(2024, 5, 12)
    assert history_a[0].rating == pytest.approx(1500.0)
    assert history_a[0].match_id is None
    assert history_a[0].change == 0
    assert [snapshot.match_id for snapshot in history_a[1:]] == ["m1", "m2"]
    assert history_a[-1].rating == pytest.approx(players["A"].current_rating)
    assert players["A"].last_change == history_a[-1].change

    # E first appears in the second match.
    history_e = players["E"].rating_history
    assert history_e[0].date == date(2024, 6, 9)
    assert len(history_e) == 2


def test_leaderboard_ties_keep_first_seen_order() -> None:
    result = process_all_matches([_match("m1", ("C", "D"), ("A", "B"), (15, 10))])
    assert [player.id for player in result.players] == ["C", "D", "A", "B"]

    result = process_all_matches([_match("m1", ("A", "B"), ("C", "D"), (10, 15))])
    assert [player.id for player in result.players] == ["C", "D", "A", "B"]


def test_empty_input_produces_empty_result() -> None:
    result = process_all_matches([])
    assert result.players == []
    assert result.matches == []


def test_processing_is_deterministic() -> None:
    matches = [
        _match("m1", ("A", "B"), ("C", "D"), (15, 10)),
        _match("m2", ("A", "C"), ("B", "D"), (15, 13)),
        _match("m3", ("A", "D"), ("B", "C"), (11, 15)),
    ]
    assert process_all_matches(matches) == process_all_matches(matches)


def test_custom_parameters_are_used() -> None:
    params = EloParameters(initial_elo=1000.0, k_factor=10.0, calibration_games=0)
    result = process_all_matches([_match("m1", ("A", "B"), ("C", "D"), (15, 10))], params)

    ratings = {player.id: player.current_rating for player in result.players}
    assert ratings["A"] == pytest.approx(1005.0)
    assert ratings["C"] == pytest.approx(995.0)
    assert all(player.is_calibrated for player in result.players)
