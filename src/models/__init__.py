"""ORM models."""

from models.base import Base
from models.ratings import EloSystem, PlayerElo
from models.tournament import Group, League, Match, Player, Season, Tournament

__all__ = [
    "Base",
    "EloSystem",
    "Group",
    "League",
    "Match",
    "Player",
    "PlayerElo",
    "Season",
    "Tournament",
]
