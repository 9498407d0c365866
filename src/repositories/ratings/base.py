"""Generic persistence scaffold for rating repositories."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from sqlalchemy import delete, func, insert, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from models.base import Base

SystemModelT = TypeVar("SystemModelT")
EventModelT = TypeVar("EventModelT")
DomainEventT = TypeVar("DomainEventT")

EventToRowFn = Callable[[Any, int, Mapping[str, int]], dict[str, Any]]


class BaseRatingRepository(Generic[SystemModelT, EventModelT, DomainEventT]):
    """Reusable persistence operations shared across rating systems."""

    def __init__(
        self,
        *,
        system_model: type[SystemModelT],
        event_model: type[EventModelT],
        system_id_column: str,
        entity_id_column: str,
        event_to_row: EventToRowFn,
    ) -> None:
        self.system_model = system_model
        self.event_model = event_model
        self.system_id_column = system_id_column
        self.entity_id_column = entity_id_column
        self.event_to_row = event_to_row

    def ensure_schema(self, engine: Engine) -> None:
        """Create required tables and indexes when missing."""
        Base.metadata.create_all(engine, checkfirst=True)

    def upsert_system(
        self,
        session: Session,
        *,
        name: str,
        description: str | None,
        config_json: dict[str, Any],
    ) -> SystemModelT:
        """Create or update the system metadata row."""
        name_column = getattr(self.system_model, "name")
        system = session.execute(select(self.system_model).where(name_column == name)).scalar_one_or_none()
        if system is None:
            system = self.system_model(  # type: ignore[call-arg]
                name=name,
                description=description,
                config_json=config_json,
            )
            session.add(system)
        else:
            setattr(system, "description", description)
            setattr(system, "config_json", config_json)
            if hasattr(system, "updated_at"):
                setattr(system, "updated_at", datetime.now(UTC).replace(tzinfo=None))
        session.flush()
        return system

    def delete_events_for_system(self, session: Session, system_id: int) -> None:
        """Delete historical events for one system."""
        system_column = getattr(self.event_model, self.system_id_column)
        session.execute(delete(self.event_model).where(system_column == system_id))

    def insert_events(
        self,
        session: Session,
        events: Sequence[DomainEventT],
        *,
        system_id: int,
        entity_ids: Mapping[str, int],
    ) -> None:
        """Bulk insert domain events; `entity_ids` maps player names to row ids."""
        if not events:
            return

        payload = [self.event_to_row(event, system_id, entity_ids) for event in events]
        session.execute(insert(self.event_model), payload)

    def count_tracked_entities(self, session: Session, *, system_id: int | None = None) -> int:
        """Count distinct rated entities for one system or all systems."""
        entity_column = getattr(self.event_model, self.entity_id_column)
        statement = select(func.count(func.distinct(entity_column)))

        if system_id is not None:
            system_column = getattr(self.event_model, self.system_id_column)
            statement = statement.where(system_column == system_id)

        result = session.scalar(statement)
        return int(result or 0)
