"""Rebuild pipeline for stored player Elo ratings."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session, sessionmaker

from domain.ratings.elo.calculator import PlayerEloCalculator, PlayerEloEvent
from domain.ratings.elo.config import EloSystemConfig
from repositories.ratings.base import BaseRatingRepository
from repositories.tournament_repository import fetch_player_ids, fetch_season_matches


@dataclass(frozen=True)
class RebuildSummary:
    """Outcome for one rebuilt system config."""

    system_name: str
    config_file: str
    system_id: int
    season_id: int | None
    processed_matches: int
    inserted_events: int
    tracked_players: int
    dry_run: bool


def rebuild_player_elo(
    *,
    session_factory: sessionmaker[Session],
    repository: BaseRatingRepository[Any, Any, PlayerEloEvent],
    system_config: EloSystemConfig,
    season_id: int | None = None,
    batch_size: int = 5000,
    dry_run: bool = False,
    echo: Callable[[str], None] | None = None,
) -> RebuildSummary:
    """Recompute one Elo system from stored matches and replace its events."""
    if batch_size <= 0:
        raise ValueError("batch_size must be greater than 0")

    inserted_events = 0

    with session_factory() as session:
        matches = fetch_season_matches(session, season_id)
        total_matches = len(matches)

        calculator = PlayerEloCalculator(system_config.parameters)
        system = repository.upsert_system(
            session,
            name=system_config.name,
            description=system_config.description,
            config_json=system_config.as_config_json(),
        )
        system_id = int(getattr(system, "id"))

        if dry_run:
            for match in matches:
                calculator.process_match(match)

            tracked_players = calculator.tracked_entity_count()
            if echo is not None:
                echo(
                    f"[dry-run] config={system_config.file_path.name} "
                    f"system={system_config.name} "
                    f"processed_matches={total_matches} "
                    f"tracked_players={tracked_players}"
                )
            session.rollback()
            return RebuildSummary(
                system_name=system_config.name,
                config_file=system_config.file_path.name,
                system_id=system_id,
                season_id=season_id,
                processed_matches=total_matches,
                inserted_events=0,
                tracked_players=tracked_players,
                dry_run=True,
            )

        player_ids = fetch_player_ids(session)
        buffered_events: list[PlayerEloEvent] = []
        try:
            repository.delete_events_for_system(session, system_id)

            for index, match in enumerate(matches, start=1):
                buffered_events.extend(calculator.process_match(match))

                if len(buffered_events) >= batch_size:
                    payload = buffered_events[:]
                    buffered_events.clear()
                    repository.insert_events(session, payload, system_id=system_id, entity_ids=player_ids)
                    inserted_events += len(payload)

                if echo is not None and index % 1_000 == 0:
                    echo(
                        f"config={system_config.file_path.name} "
                        f"processed_matches={index}/{total_matches}"
                    )

            if buffered_events:
                payload = buffered_events[:]
                buffered_events.clear()
                repository.insert_events(session, payload, system_id=system_id, entity_ids=player_ids)
                inserted_events += len(payload)

            session.commit()
        except Exception:
            session.rollback()
            raise

        tracked_players = repository.count_tracked_entities(session, system_id=system_id)
        if echo is not None:
            echo(
                "completed "
                f"config={system_config.file_path.name} "
                f"system={system_config.name} "
                f"system_id={system_id} "
                f"processed_matches={total_matches} "
                f"inserted_events={inserted_events} "
                f"tracked_players={tracked_players}"
            )

        return RebuildSummary(
            system_name=system_config.name,
            config_file=system_config.file_path.name,
            system_id=system_id,
            season_id=season_id,
            processed_matches=total_matches,
            inserted_events=inserted_events,
            tracked_players=tracked_players,
            dry_run=False,
        )


__all__ = ["RebuildSummary", "rebuild_player_elo"]
