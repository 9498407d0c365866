"""Database repository helpers."""

from repositories.ratings.definitions import PLAYER_ELO_REPOSITORY, ensure_player_elo_schema
from repositories.tournament_repository import (
    fetch_group_matches,
    fetch_player_ids,
    fetch_season_matches,
    import_tournament,
)

__all__ = [
    "PLAYER_ELO_REPOSITORY",
    "ensure_player_elo_schema",
    "fetch_group_matches",
    "fetch_player_ids",
    "fetch_season_matches",
    "import_tournament",
]
