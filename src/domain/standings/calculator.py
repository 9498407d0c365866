"""Group standings: one aggregation pass, two ranking strategies."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from domain.common import Match
from domain.ratings.elo.calculator import round_half_away_from_zero
from domain.standings.scoring import ScoringStrategy, italian_points


@dataclass(frozen=True)
class MatchDetail:
    """Audit entry for one player in one match, from that player's side."""

    match_id: str | int
    partner: str
    opponents: tuple[str, str]
    score: tuple[int, int]
    won: bool
    margin: int
    points: int


@dataclass
class PlayerTally:
    player_id: str
    games: int = 0
    wins: int = 0
    losses: int = 0
    italian_points: int = 0
    points_for: int = 0
    points_against: int = 0
    details: list[MatchDetail] = field(default_factory=list)

    def merge(self, other: PlayerTally) -> None:
        self.games += other.games
        self.wins += other.wins
        self.losses += other.losses
        self.italian_points += other.italian_points
        self.points_for += other.points_for
        self.points_against += other.points_against
        self.details.extend(other.details)


@dataclass(frozen=True)
class StandingsRow:
    rank: int
    player_id: str
    games: int
    wins: int
    losses: int
    italian_points: int
    points_for: int
    points_against: int
    details: tuple[MatchDetail, ...]

    @property
    def points_diff(self) -> int:
        return self.points_for - self.points_against

    @property
    def win_rate(self) -> int:
        """Share of games won, as a rounded percentage."""
        if self.games == 0:
            return 0
        return round_half_away_from_zero(self.wins / self.games * 100)


class StandingsAccumulator:
    """Per-player tallies for one group, keyed in first-encountered order."""

    def __init__(self) -> None:
        self._tallies: dict[str, PlayerTally] = {}

    def _get_or_create(self, player_id: str) -> PlayerTally:
        tally = self._tallies.get(player_id)
        if tally is None:
            tally = PlayerTally(player_id=player_id)
            self._tallies[player_id] = tally
        return tally

    def __len__(self) -> int:
        return len(self._tallies)

    def tallies(self) -> list[PlayerTally]:
        return list(self._tallies.values())

    def add_match(self, match: Match) -> None:
        score1, score2 = match.score
        sides = (
            (match.team1, match.team2, score1, score2),
            (match.team2, match.team1, score2, score1),
        )
        for player_id in match.players:
            self._get_or_create(player_id)

        for team, opponents, my_score, opponent_score in sides:
            won = my_score > opponent_score
            points = italian_points(my_score, opponent_score)
            for index, player_id in enumerate(team):
                tally = self._tallies[player_id]
                tally.games += 1
                if won:
                    tally.wins += 1
                else:
                    tally.losses += 1
                tally.italian_points += points
                tally.points_for += my_score
                tally.points_against += opponent_score
                tally.details.append(
                    MatchDetail(
                        match_id=match.id,
                        partner=team[1 - index],
                        opponents=(opponents[0], opponents[1]),
                        score=(my_score, opponent_score),
                        won=won,
                        margin=abs(my_score - opponent_score),
                        points=points,
                    )
                )

    def add_matches(self, matches: Iterable[Match]) -> StandingsAccumulator:
        for match in matches:
            self.add_match(match)
        return self

    def merge(self, other: StandingsAccumulator) -> StandingsAccumulator:
        """Fold `other` into this accumulator as if its matches came after ours."""
        for tally in other.tallies():
            target = self._get_or_create(tally.player_id)
            target.merge(
                PlayerTally(
                    player_id=tally.player_id,
                    games=tally.games,
                    wins=tally.wins,
                    losses=tally.losses,
                    italian_points=tally.italian_points,
                    points_for=tally.points_for,
                    points_against=tally.points_against,
                    details=list(tally.details),
                )
            )
        return self

    def rows(self, strategy: ScoringStrategy = ScoringStrategy.ITALIAN) -> list[StandingsRow]:
        ranked = sorted(self._tallies.values(), key=_sort_key(strategy), reverse=True)
        return [
            StandingsRow(
                rank=position,
                player_id=tally.player_id,
                games=tally.games,
                wins=tally.wins,
                losses=tally.losses,
                italian_points=tally.italian_points,
                points_for=tally.points_for,
                points_against=tally.points_against,
                details=tuple(tally.details),
            )
            for position, tally in enumerate(ranked, start=1)
        ]


def _sort_key(strategy: ScoringStrategy):
    if strategy is ScoringStrategy.ITALIAN:
        return lambda tally: (tally.italian_points, tally.points_for - tally.points_against)
    if strategy is ScoringStrategy.WIN_LOSS:
        return lambda tally: (tally.wins, tally.points_for - tally.points_against)
    raise ValueError(f"Unsupported scoring strategy: {strategy!r}")


def calculate_standings(
    matches: Iterable[Match],
    strategy: ScoringStrategy = ScoringStrategy.ITALIAN,
) -> list[StandingsRow]:
    """Rank the players of one group."""
    return StandingsAccumulator().add_matches(matches).rows(strategy)


__all__ = [
    "MatchDetail",
    "PlayerTally",
    "StandingsAccumulator",
    "StandingsRow",
    "calculate_standings",
]
