"""Shared match types for the rating and standings engines."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

QUALIFICATION_STAGE = "qualification"
PLAYOFF_STAGE = "playoff"


class PreconditionViolation(ValueError):
    """A match record breaks the input contract of the engines."""


@dataclass(frozen=True)
class Match:
    """Canonical doubles match payload consumed by both engines."""

    id: str | int
    date: date
    team1: tuple[str, str]
    team2: tuple[str, str]
    score: tuple[int, int]
    tournament: str | None = None
    league: str | None = None
    group: str | None = None
    stage: str = QUALIFICATION_STAGE
    round: str | None = None
    court: int | None = None

    @property
    def winner(self) -> int:
        return 1 if self.score[0] > self.score[1] else 2

    @property
    def players(self) -> tuple[str, str, str, str]:
        return (*self.team1, *self.team2)

    @property
    def is_playoff(self) -> bool:
        return self.stage == PLAYOFF_STAGE

    def side_of(self, player_id: str) -> int | None:
        """Return 1 or 2 for the player's team, or None when absent."""
        if player_id in self.team1:
            return 1
        if player_id in self.team2:
            return 2
        return None


def validate_match(match: Match) -> None:
    """Check the engine input contract; raise PreconditionViolation on failure."""
    validate_teams(match)
    validate_score(match)


def validate_teams(match: Match) -> None:
    for label, team in (("team1", match.team1), ("team2", match.team2)):
        if len(team) != 2 or not all(isinstance(player, str) and player for player in team):
            raise PreconditionViolation(
                f"match_id={match.id} {label} must contain exactly two player names, got {team!r}"
            )
        if team[0] == team[1]:
            raise PreconditionViolation(
                f"match_id={match.id} {label} lists the same player twice ({team[0]})"
            )

    overlap = set(match.team1) & set(match.team2)
    if overlap:
        raise PreconditionViolation(
            f"match_id={match.id} has players on both teams: {sorted(overlap)}"
        )


def validate_score(match: Match) -> None:
    if len(match.score) != 2:
        raise PreconditionViolation(f"match_id={match.id} score must have two values")
    for value in match.score:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise PreconditionViolation(
                f"match_id={match.id} has invalid score {match.score!r}"
            )
    if match.score[0] == match.score[1]:
        raise PreconditionViolation(
            f"match_id={match.id} is a draw ({match.score[0]}-{match.score[1]})"
        )


__all__ = [
    "Match",
    "PLAYOFF_STAGE",
    "PreconditionViolation",
    "QUALIFICATION_STAGE",
    "validate_match",
    "validate_score",
    "validate_teams",
]
