"""Player-level Elo logic for doubles matches with a calibration period."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from math import floor

from domain.common import Match

INITIAL_RATING = 1500
K_FACTOR_DEFAULT = 32
K_FACTOR_CALIBRATION = 40
CALIBRATION_GAMES = 15
SCALE_FACTOR = 400


@dataclass(frozen=True)
class EloParameters:
    initial_elo: float = float(INITIAL_RATING)
    k_factor: float = float(K_FACTOR_DEFAULT)
    calibration_k_factor: float = float(K_FACTOR_CALIBRATION)
    calibration_games: int = CALIBRATION_GAMES
    scale_factor: float = float(SCALE_FACTOR)


@dataclass(frozen=True)
class RatingSnapshot:
    """One point of a player's rating history."""

    date: date
    rating: float
    match_id: str | int | None
    change: int


@dataclass
class RatingState:
    """Running accumulator for one player inside a single computation."""

    rating: float
    games_played: int = 0
    history: list[RatingSnapshot] = field(default_factory=list)


@dataclass(frozen=True)
class PlayerEloEvent:
    player_id: str
    partner_id: str
    opponent_ids: tuple[str, str]
    match_id: str | int
    event_date: date
    won: bool
    actual_score: float
    expected_score: float
    pre_elo: float
    elo_delta: int
    post_elo: float
    k_factor: float
    games_played_pre: int


@dataclass(frozen=True)
class PlayerRating:
    """Final leaderboard record for one player."""

    id: str
    current_rating: float
    games_played: int
    is_calibrated: bool
    rating_history: tuple[RatingSnapshot, ...]
    last_change: int


@dataclass(frozen=True)
class RatedMatch:
    """Input match annotated with the rating delta of each participant."""

    match: Match
    rating_changes: dict[str, int]


@dataclass(frozen=True)
class EloRatingResult:
    players: list[PlayerRating]
    matches: list[RatedMatch]


def calculate_expected_score(
    rating: float,
    opponent_rating: float,
    scale_factor: float = float(SCALE_FACTOR),
) -> float:
    """Compute the Elo expected score for one player against a team average."""
    return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / scale_factor))


def calculate_team_rating(rating1: float, rating2: float) -> float:
    return (rating1 + rating2) / 2.0


def round_half_away_from_zero(value: float) -> int:
    """Round to the nearest integer, with .5 moving away from zero."""
    magnitude = floor(abs(value) + 0.5)
    return int(magnitude) if value >= 0 else -int(magnitude)


def get_k_factor(games_played: int, params: EloParameters | None = None) -> float:
    """K-factor for a player with `games_played` matches before the current one."""
    params = params or EloParameters()
    if games_played < params.calibration_games:
        return params.calibration_k_factor
    return params.k_factor


def calculate_rating_change(
    player_rating: float,
    opponent_team_rating: float,
    is_winner: bool,
    games_played: int,
    params: EloParameters | None = None,
) -> int:
    params = params or EloParameters()
    expected = calculate_expected_score(player_rating, opponent_team_rating, params.scale_factor)
    actual = 1.0 if is_winner else 0.0
    return round_half_away_from_zero(get_k_factor(games_played, params) * (actual - expected))


class PlayerEloCalculator:
    """Stateful match-by-match doubles Elo calculator.

    Players are created on first reference. All four deltas of a match are
    computed from the ratings and game counts frozen before the match.
    """

    def __init__(self, params: EloParameters | None = None) -> None:
        self.params = params or EloParameters()
        self._states: dict[str, RatingState] = {}

    def _get_or_create_state(self, player_id: str, first_seen: date) -> RatingState:
        state = self._states.get(player_id)
        if state is None:
            state = RatingState(rating=self.params.initial_elo)
            state.history.append(
                RatingSnapshot(date=first_seen, rating=self.params.initial_elo, match_id=None, change=0)
            )
            self._states[player_id] = state
        return state

    def get_rating(self, player_id: str) -> float:
        state = self._states.get(player_id)
        return self.params.initial_elo if state is None else state.rating

    def get_games_played(self, player_id: str) -> int:
        state = self._states.get(player_id)
        return 0 if state is None else state.games_played

    def tracked_entity_count(self) -> int:
        return len(self._states)

    def process_match(self, match: Match) -> list[PlayerEloEvent]:
        states = {
            player_id: self._get_or_create_state(player_id, match.date)
            for player_id in match.players
        }
        pre_ratings = {player_id: state.rating for player_id, state in states.items()}
        pre_games = {player_id: state.games_played for player_id, state in states.items()}

        team1_avg_pre = calculate_team_rating(pre_ratings[match.team1[0]], pre_ratings[match.team1[1]])
        team2_avg_pre = calculate_team_rating(pre_ratings[match.team2[0]], pre_ratings[match.team2[1]])
        team1_won = match.winner == 1

        sides = (
            (match.team1, match.team2, team2_avg_pre, team1_won),
            (match.team2, match.team1, team1_avg_pre, not team1_won),
        )

        events: list[PlayerEloEvent] = []
        for team, opponents, opponent_avg_pre, won in sides:
            for index, player_id in enumerate(team):
                pre_elo = pre_ratings[player_id]
                games_played_pre = pre_games[player_id]
                expected = calculate_expected_score(pre_elo, opponent_avg_pre, self.params.scale_factor)
                actual = 1.0 if won else 0.0
                k_factor = get_k_factor(games_played_pre, self.params)
                delta = round_half_away_from_zero(k_factor * (actual - expected))
                events.append(
                    PlayerEloEvent(
                        player_id=player_id,
                        partner_id=team[1 - index],
                        opponent_ids=(opponents[0], opponents[1]),
                        match_id=match.id,
                        event_date=match.date,
                        won=won,
                        actual_score=actual,
                        expected_score=expected,
                        pre_elo=pre_elo,
                        elo_delta=delta,
                        post_elo=pre_elo + delta,
                        k_factor=k_factor,
                        games_played_pre=games_played_pre,
                    )
                )

        for event in events:
            state = states[event.player_id]
            state.rating = event.post_elo
            state.games_played += 1
            state.history.append(
                RatingSnapshot(
                    date=match.date,
                    rating=event.post_elo,
                    match_id=match.id,
                    change=event.elo_delta,
                )
            )

        return events

    def leaderboard(self) -> list[PlayerRating]:
        """Players sorted by current rating, ties in first-seen order."""
        players = [
            PlayerRating(
                id=player_id,
                current_rating=state.rating,
                games_played=state.games_played,
                is_calibrated=state.games_played >= self.params.calibration_games,
                rating_history=tuple(state.history),
                last_change=state.history[-1].change if len(state.history) > 1 else 0,
            )
            for player_id, state in self._states.items()
        ]
        return sorted(players, key=lambda player: player.current_rating, reverse=True)


def process_all_matches(
    matches: Iterable[Match],
    params: EloParameters | None = None,
) -> EloRatingResult:
    """Run the Elo engine over matches given in chronological play order."""
    calculator = PlayerEloCalculator(params)
    rated_matches: list[RatedMatch] = []
    for match in matches:
        events = calculator.process_match(match)
        rated_matches.append(
            RatedMatch(
                match=match,
                rating_changes={event.player_id: event.elo_delta for event in events},
            )
        )
    return EloRatingResult(players=calculator.leaderboard(), matches=rated_matches)


__all__ = [
    "CALIBRATION_GAMES",
    "EloParameters",
    "EloRatingResult",
    "INITIAL_RATING",
    "K_FACTOR_CALIBRATION",
    "K_FACTOR_DEFAULT",
    "PlayerEloCalculator",
    "PlayerEloEvent",
    "PlayerRating",
    "RatedMatch",
    "RatingSnapshot",
    "RatingState",
    "calculate_expected_score",
    "calculate_rating_change",
    "calculate_team_rating",
    "get_k_factor",
    "process_all_matches",
    "round_half_away_from_zero",
]
