"""Season, tournament, league, group, player and match table models."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base


class Season(Base):
    """One season of tournament stages (for example a grand prix year)."""

    __tablename__ = "seasons"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )

    tournaments: Mapped[list[Tournament]] = relationship(back_populates="season")


class Tournament(Base):
    """One stage of a season; stage_number is NULL for the season final."""

    __tablename__ = "tournaments"
    __table_args__ = (Index("idx_tournaments_season", "season_id"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    season_id: Mapped[int] = mapped_column(ForeignKey("seasons.id"), nullable=False)
    stage_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    played_on: Mapped[date] = mapped_column("date", Date, nullable=False)
    format: Mapped[str] = mapped_column(
        Enum("mixed", "same_sex", name="tournament_format", native_enum=False),
        nullable=False,
    )
    pairing: Mapped[str] = mapped_column(
        Enum("random", "fixed", name="tournament_pairing", native_enum=False),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )

    season: Mapped[Season] = relationship(back_populates="tournaments")
    leagues: Mapped[list[League]] = relationship(back_populates="tournament")


class League(Base):
    __tablename__ = "leagues"
    __table_args__ = (Index("idx_leagues_tournament", "tournament_id"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    tournament_id: Mapped[int] = mapped_column(ForeignKey("tournaments.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    tournament: Mapped[Tournament] = relationship(back_populates="leagues")
    groups: Mapped[list[Group]] = relationship(back_populates="league")


class Group(Base):
    """A qualification group, or the playoff bucket of a league."""

    __tablename__ = "groups"
    __table_args__ = (Index("idx_groups_league", "league_id"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    league_id: Mapped[int] = mapped_column(ForeignKey("leagues.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    stage: Mapped[str] = mapped_column(
        Enum("qualification", "playoff", name="group_stage", native_enum=False),
        nullable=False,
    )

    league: Mapped[League] = relationship(back_populates="groups")


class Player(Base):
    __tablename__ = "players"
    __table_args__ = (Index("idx_players_name", "name"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False, unique=True)
    gender: Mapped[str | None] = mapped_column(
        Enum("male", "female", name="player_gender", native_enum=False),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )


class Match(Base):
    """One doubles match; round is NULL for qualification matches."""

    __tablename__ = "matches"
    __table_args__ = (
        CheckConstraint("score1 >= 0 AND score2 >= 0", name="ck_matches_scores_non_negative"),
        Index("idx_matches_group", "group_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    group_id: Mapped[int] = mapped_column(ForeignKey("groups.id"), nullable=False)
    match_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    court: Mapped[int | None] = mapped_column(Integer, nullable=True)
    round: Mapped[str | None] = mapped_column(String(32), nullable=True)
    team1_player1_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    team1_player2_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    team2_player1_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    team2_player2_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    score1: Mapped[int] = mapped_column(Integer, nullable=False)
    score2: Mapped[int] = mapped_column(Integer, nullable=False)
    referee_id: Mapped[int | None] = mapped_column(ForeignKey("players.id"), nullable=True)
