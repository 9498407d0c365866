"""Store raw tournaments and materialize them back as engine match records."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import date
from typing import Any

from sqlalchemy import Select, select
from sqlalchemy.orm import Session, aliased

from domain.common import (
    PLAYOFF_STAGE,
    QUALIFICATION_STAGE,
    Match,
    PreconditionViolation,
    validate_score,
    validate_teams,
)
from domain.gender import GenderResolver, infer_gender
from domain.parsing import NameNormalizer, NameTable
from models.tournament import Group, League, Player, Season, Tournament
from models.tournament import Match as MatchRow

PLAYOFF_GROUP_NAME = "Плейофф"
FINAL_TOURNAMENT_NAME = "Финал"


class PlayerCache:
    """Name -> players.id lookups scoped to one import call."""

    def __init__(self, session: Session, gender_resolver: GenderResolver) -> None:
        self.session = session
        self.gender_resolver = gender_resolver
        self._ids: dict[str, int] = {}

    def get_or_create(self, name: str) -> int:
        cached = self._ids.get(name)
        if cached is not None:
            return cached

        player = self.session.execute(select(Player).where(Player.name == name)).scalar_one_or_none()
        if player is None:
            player = Player(name=name, gender=self.gender_resolver(name).value)
            self.session.add(player)
            self.session.flush()
        self._ids[name] = player.id
        return player.id


def _get_or_create_season(session: Session, name: str, year: int, echo: Callable[[str], None] | None) -> Season:
    season = session.execute(
        select(Season).where(Season.name == name, Season.year == year)
    ).scalar_one_or_none()
    if season is None:
        season = Season(name=name, year=year)
        session.add(season)
        session.flush()
        if echo is not None:
            echo(f"created season={name} year={year} season_id={season.id}")
    return season


def _check_raw_match(
    raw_match: Mapping[str, Any],
    normalize: NameNormalizer,
    event_date: date,
) -> tuple[tuple[str, ...], tuple[str, ...]]:
    try:
        match = Match(
            id=raw_match["id"],
            date=event_date,
            team1=tuple(normalize(str(name)) for name in raw_match["team1"]),  # type: ignore[arg-type]
            team2=tuple(normalize(str(name)) for name in raw_match["team2"]),  # type: ignore[arg-type]
            score=tuple(raw_match["score"]),  # type: ignore[arg-type]
        )
    except (KeyError, TypeError) as exc:
        raise PreconditionViolation(f"malformed match: {raw_match!r}") from exc

    validate_teams(match)
    # Draws are stored as played and dropped when matches are fetched.
    if len(match.score) != 2 or match.score[0] != match.score[1]:
        validate_score(match)
    return match.team1, match.team2


def import_tournament(
    session: Session,
    raw: Mapping[str, Any],
    *,
    season_name: str,
    season_year: int,
    stage_number: int | None,
    tournament_format: str,
    pairing: str,
    name_normalizer: NameNormalizer | None = None,
    gender_resolver: GenderResolver = infer_gender,
    echo: Callable[[str], None] | None = None,
) -> int:
    """Insert one raw tournament and return the new tournament id.

    The caller owns the transaction boundary.
    """
    normalize = name_normalizer or NameTable()
    players = PlayerCache(session, gender_resolver)
    event_date = date.fromisoformat(str(raw["date"]))

    season = _get_or_create_season(session, season_name, season_year, echo)
    tournament = Tournament(
        season_id=season.id,
        stage_number=stage_number,
        name=f"{stage_number} этап" if stage_number else FINAL_TOURNAMENT_NAME,
        played_on=event_date,
        format=tournament_format,
        pairing=pairing,
    )
    session.add(tournament)
    session.flush()

    def store(group_id: int, raw_match: Mapping[str, Any], *, playoff: bool) -> None:
        team1, team2 = _check_raw_match(raw_match, normalize, event_date)
        referee = raw_match.get("referee")
        session.add(
            MatchRow(
                group_id=group_id,
                match_number=raw_match["id"],
                court=None if playoff else raw_match.get("court"),
                round=raw_match.get("round") if playoff else None,
                team1_player1_id=players.get_or_create(team1[0]),
                team1_player2_id=players.get_or_create(team1[1]),
                team2_player1_id=players.get_or_create(team2[0]),
                team2_player2_id=players.get_or_create(team2[1]),
                score1=raw_match["score"][0],
                score2=raw_match["score"][1],
                referee_id=players.get_or_create(normalize(referee)) if referee and not playoff else None,
            )
        )

    total_matches = 0
    for sort_order, league_raw in enumerate(raw.get("leagues", [])):
        league = League(tournament_id=tournament.id, name=str(league_raw["name"]), sort_order=sort_order)
        session.add(league)
        session.flush()

        for group_raw in league_raw.get("groups", []):
            group = Group(
                league_id=league.id,
                name=str(group_raw["name"]),
                stage=group_raw.get("stage") or QUALIFICATION_STAGE,
            )
            session.add(group)
            session.flush()
            for raw_match in group_raw.get("matches", []):
                store(group.id, raw_match, playoff=False)
            total_matches += len(group_raw.get("matches", []))

        playoff_raw = league_raw.get("playoff")
        if playoff_raw:
            playoff = Group(league_id=league.id, name=PLAYOFF_GROUP_NAME, stage=PLAYOFF_STAGE)
            session.add(playoff)
            session.flush()
            for raw_match in playoff_raw.get("matches", []):
                store(playoff.id, raw_match, playoff=True)
            total_matches += len(playoff_raw.get("matches", []))

    session.flush()
    if echo is not None:
        echo(
            f"imported tournament={tournament.name} date={event_date.isoformat()} "
            f"tournament_id={tournament.id} matches={total_matches}"
        )
    return tournament.id


def _match_statement() -> Select[Any]:
    p1 = aliased(Player)
    p2 = aliased(Player)
    p3 = aliased(Player)
    p4 = aliased(Player)
    return (
        select(
            MatchRow.id,
            MatchRow.court,
            MatchRow.round,
            MatchRow.score1,
            MatchRow.score2,
            Tournament.played_on.label("played_on"),
            Tournament.name.label("tournament_name"),
            League.name.label("league_name"),
            Group.name.label("group_name"),
            Group.stage,
            p1.name.label("p1_name"),
            p2.name.label("p2_name"),
            p3.name.label("p3_name"),
            p4.name.label("p4_name"),
        )
        .select_from(MatchRow)
        .join(Group, Group.id == MatchRow.group_id)
        .join(League, League.id == Group.league_id)
        .join(Tournament, Tournament.id == League.tournament_id)
        .join(p1, p1.id == MatchRow.team1_player1_id)
        .join(p2, p2.id == MatchRow.team1_player2_id)
        .join(p3, p3.id == MatchRow.team2_player1_id)
        .join(p4, p4.id == MatchRow.team2_player2_id)
        .where(MatchRow.score1 != MatchRow.score2)
        .order_by(
            Tournament.played_on,
            Tournament.id,
            League.sort_order,
            League.id,
            Group.id,
            MatchRow.match_number,
            MatchRow.id,
        )
    )


def _row_to_match(row: Any) -> Match:
    return Match(
        id=row.id,
        date=row.played_on,
        team1=(row.p1_name, row.p2_name),
        team2=(row.p3_name, row.p4_name),
        score=(row.score1, row.score2),
        tournament=row.tournament_name,
        league=row.league_name,
        group=row.group_name,
        stage=row.stage,
        round=row.round,
        court=row.court,
    )


def fetch_season_matches(session: Session, season_id: int | None = None) -> list[Match]:
    """Decided matches of one season (or all seasons) in play order."""
    statement = _match_statement()
    if season_id is not None:
        statement = statement.where(Tournament.season_id == season_id)
    return [_row_to_match(row) for row in session.execute(statement)]


def fetch_group_matches(session: Session, group_id: int) -> list[Match]:
    statement = _match_statement().where(Group.id == group_id)
    return [_row_to_match(row) for row in session.execute(statement)]


def fetch_player_ids(session: Session) -> dict[str, int]:
    return {name: player_id for player_id, name in session.execute(select(Player.id, Player.name))}


__all__ = [
    "PlayerCache",
    "fetch_group_matches",
    "fetch_player_ids",
    "fetch_season_matches",
    "import_tournament",
]
