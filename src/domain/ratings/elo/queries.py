"""Read-side helpers over an Elo run: player lookups, match details and totals."""

from __future__ import annotations

from dataclasses import dataclass

from domain.ratings.elo.calculator import PlayerRating, RatedMatch, round_half_away_from_zero


@dataclass(frozen=True)
class MatchDetails:
    """One match seen from a single player's side."""

    partner: str
    opponents: tuple[str, str]
    player_won: bool
    player_score: int
    opponent_score: int
    rating_change: int | None


@dataclass(frozen=True)
class RatingStats:
    total_games: int
    total_players: int
    average_rating: int
    calibrated_players: int


def get_player(players: list[PlayerRating], player_id: str) -> PlayerRating | None:
    return next((player for player in players if player.id == player_id), None)


def get_player_matches(matches: list[RatedMatch], player_id: str) -> list[RatedMatch]:
    return [rated for rated in matches if rated.match.side_of(player_id) is not None]


def get_match_details(rated: RatedMatch, player_id: str) -> MatchDetails:
    match = rated.match
    side = match.side_of(player_id)
    if side is None:
        raise ValueError(f"player={player_id} did not play match_id={match.id}")

    team, opponents = (match.team1, match.team2) if side == 1 else (match.team2, match.team1)
    player_score, opponent_score = match.score if side == 1 else (match.score[1], match.score[0])
    return MatchDetails(
        partner=team[1] if team[0] == player_id else team[0],
        opponents=(opponents[0], opponents[1]),
        player_won=match.winner == side,
        player_score=player_score,
        opponent_score=opponent_score,
        rating_change=rated.rating_changes.get(player_id),
    )


def calculate_stats(players: list[PlayerRating], matches: list[RatedMatch]) -> RatingStats:
    if players:
        average_rating = round_half_away_from_zero(
            sum(player.current_rating for player in players) / len(players)
        )
    else:
        average_rating = 0
    return RatingStats(
        total_games=len(matches),
        total_players=len(players),
        average_rating=average_rating,
        calibrated_players=sum(1 for player in players if player.is_calibrated),
    )


__all__ = [
    "MatchDetails",
    "RatingStats",
    "calculate_stats",
    "get_match_details",
    "get_player",
    "get_player_matches",
]
