"""Rating-system ORM models."""

from models.ratings.elo import EloSystem, PlayerElo

__all__ = ["EloSystem", "PlayerElo"]
