"""Tests for storing tournaments and reading them back as match records."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from db import create_db_engine, create_session_factory
from domain.common import PLAYOFF_STAGE, PreconditionViolation
from domain.parsing import NameTable
from models.tournament import Group, Player, Season, Tournament
from repositories.ratings.definitions import ensure_player_elo_schema
from repositories.tournament_repository import (
    PLAYOFF_GROUP_NAME,
    fetch_group_matches,
    fetch_player_ids,
    fetch_season_matches,
    import_tournament,
)


def _raw_tournament(played_on: str = "2024-05-12") -> dict[str, Any]:
    return {
        "tournament": "Гран-при",
        "date": played_on,
        "leagues": [
            {
                "name": "Hard",
                "groups": [
                    {
                        "name": "A",
                        "matches": [
                            {
                                "id": 1,
                                "court": 1,
                                "team1": ["Иванов Иван", "Петрова Мария"],
                                "team2": ["Сидоров Пётр", "Подковырина Вас."],
                                "score": [15, 13],
                                "referee": "Орлов Олег",
                            },
                            {
                                "id": 2,
                                "court": 1,
                                "team1": ["Иванов Иван", "Сидоров Пётр"],
                                "team2": ["Петрова Мария", "Подковырина Вас."],
                                "score": [14, 14],
                            },
                        ],
                    }
                ],
                "playoff": {
                    "matches": [
                        {
                            "id": 1,
                            "round": "final",
                            "team1": ["Иванов Иван", "Подковырина Вас."],
                            "team2": ["Сидоров Пётр", "Петрова Мария"],
                            "score": [21, 19],
                        }
                    ]
                },
            }
        ],
    }


@pytest.fixture
def session() -> Iterator[Session]:
    engine = create_db_engine("sqlite://")
    ensure_player_elo_schema(engine)
    session_factory = create_session_factory(engine)
    with session_factory() as session:
        yield session


def _import(session: Session, raw: dict[str, Any], stage_number: int | None = 1) -> int:
    tournament_id = import_tournament(
        session,
        raw,
        season_name="Гран-при",
        season_year=2024,
        stage_number=stage_number,
        tournament_format="mixed",
        pairing="random",
        name_normalizer=NameTable({"Подковырина Вас.": "Подковырина Василиса"}),
    )
    session.commit()
    return tournament_id


def test_import_stores_tournament_structure(session: Session) -> None:
    messages: list[str] = []
    tournament_id = import_tournament(
        session,
        _raw_tournament(),
        season_name="Гран-при",
        season_year=2024,
        stage_number=2,
        tournament_format="mixed",
        pairing="random",
        echo=messages.append,
    )
    session.commit()

    tournament = session.get(Tournament, tournament_id)
    assert tournament is not None
    assert tournament.name == "2 этап"
    assert tournament.played_on.isoformat() == "2024-05-12"

    groups = session.execute(select(Group).order_by(Group.id)).scalars().all()
    assert [(group.name, group.stage) for group in groups] == [
        ("A", "qualification"),
        (PLAYOFF_GROUP_NAME, PLAYOFF_STAGE),
    ]
    assert any(message.startswith("created season=") for message in messages)
    assert messages[-1].endswith("matches=3")


def test_final_tournament_name(session: Session) -> None:
    tournament_id = _import(session, _raw_tournament(), stage_number=None)

    tournament = session.get(Tournament, tournament_id)
    assert tournament is not None
    assert tournament.name == "Финал"


def test_players_are_created_once_with_gender(session: Session) -> None:
    _import(session, _raw_tournament("2024-05-12"))
    _import(session, _raw_tournament("2024-06-09"), stage_number=2)

    players = {player.name: player.gender for player in session.execute(select(Player)).scalars()}
    assert players == {
        "Иванов Иван": "male",
        "Петрова Мария": "female",
        "Сидоров Пётр": "male",
        "Подковырина Василиса": "female",
        "Орлов Олег": "male",
    }
    assert session.scalar(select(func.count()).select_from(Season)) == 1
    assert set(fetch_player_ids(session)) == set(players)


def test_fetch_skips_draws_and_keeps_play_order(session: Session) -> None:
    _import(session, _raw_tournament("2024-06-09"), stage_number=2)
    _import(session, _raw_tournament("2024-05-12"), stage_number=1)

    matches = fetch_season_matches(session)

    assert len(matches) == 4
    assert [(match.tournament, match.group) for match in matches] == [
        ("1 этап", "A"),
        ("1 этап", PLAYOFF_GROUP_NAME),
        ("2 этап", "A"),
        ("2 этап", PLAYOFF_GROUP_NAME),
    ]

    first = matches[0]
    assert first.team1 == ("Иванов Иван", "Петрова Мария")
    assert first.team2 == ("Сидоров Пётр", "Подковырина Василиса")
    assert first.score == (15, 13)
    assert first.court == 1
    assert first.league == "Hard"
    assert first.date.isoformat() == "2024-05-12"

    playoff = matches[1]
    assert playoff.is_playoff
    assert playoff.round == "final"
    assert playoff.court is None


def test_fetch_by_season_and_group(session: Session) -> None:
    _import(session, _raw_tournament())
    other_season_id = import_tournament(
        session,
        _raw_tournament("2025-05-11"),
        season_name="Гран-при",
        season_year=2025,
        stage_number=1,
        tournament_format="mixed",
        pairing="fixed",
    )
    session.commit()

    other = session.get(Tournament, other_season_id)
    assert other is not None
    assert len(fetch_season_matches(session, other.season_id)) == 2

    group_id = session.execute(
        select(Group.id).where(Group.name == "A").order_by(Group.id)
    ).scalars().first()
    assert group_id is not None
    group_matches = fetch_group_matches(session, group_id)
    assert len(group_matches) == 1
    assert group_matches[0].group == "A"


def test_invalid_match_is_rejected(session: Session) -> None:
    raw = _raw_tournament()
    raw["leagues"][0]["groups"][0]["matches"][0]["team2"] = ["Иванов Иван", "Сидоров Пётр"]

    with pytest.raises(PreconditionViolation):
        import_tournament(
            session,
            raw,
            season_name="Гран-при",
            season_year=2024,
            stage_number=1,
            tournament_format="mixed",
            pairing="random",
        )
    session.rollback()

    assert session.scalar(select(func.count()).select_from(Tournament)) == 0
