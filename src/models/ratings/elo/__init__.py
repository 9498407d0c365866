"""Elo ORM models."""

from models.ratings.elo.player_event import PlayerElo
from models.ratings.elo.system import EloSystem

__all__ = ["EloSystem", "PlayerElo"]
