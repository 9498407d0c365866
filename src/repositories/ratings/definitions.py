"""Central rating repository definitions."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from domain.ratings.elo.calculator import PlayerEloEvent
from models.ratings.elo import EloSystem, PlayerElo
from repositories.ratings.base import BaseRatingRepository


def _player_elo_event_to_row(
    event: PlayerEloEvent,
    system_id: int,
    player_ids: Mapping[str, int],
) -> dict[str, Any]:
    try:
        player_id = player_ids[event.player_id]
    except KeyError as exc:
        raise ValueError(f"player={event.player_id} has no stored players row") from exc

    return {
        "elo_system_id": system_id,
        "player_id": player_id,
        "match_id": int(event.match_id),
        "event_date": event.event_date,
        "won": event.won,
        "actual_score": event.actual_score,
        "expected_score": event.expected_score,
        "games_played_pre": event.games_played_pre,
        "pre_elo": event.pre_elo,
        "elo_delta": event.elo_delta,
        "post_elo": event.post_elo,
        "k_factor": event.k_factor,
    }


PLAYER_ELO_REPOSITORY: BaseRatingRepository[EloSystem, PlayerElo, PlayerEloEvent] = BaseRatingRepository(
    system_model=EloSystem,
    event_model=PlayerElo,
    system_id_column="elo_system_id",
    entity_id_column="player_id",
    event_to_row=_player_elo_event_to_row,
)
ensure_player_elo_schema = PLAYER_ELO_REPOSITORY.ensure_schema

__all__ = ["PLAYER_ELO_REPOSITORY", "ensure_player_elo_schema"]
