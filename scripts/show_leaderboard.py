#!/usr/bin/env python3
"""Compute and print the player Elo leaderboard."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, create_session_factory
from domain.common import Match
from domain.parsing import NameTable, parse_tournament
from domain.ratings.elo.calculator import process_all_matches
from domain.ratings.elo.queries import calculate_stats
from repositories.tournament_repository import fetch_season_matches

DEFAULT_NAMES_FILE = ROOT_DIR / "configs" / "names.toml"

app = typer.Typer(
    add_completion=False,
    help="Show the player Elo leaderboard.",
)


def _load_matches_from_files(json_paths: list[Path], names_file: Path | None) -> list[Match]:
    name_table = NameTable.from_toml(names_file) if names_file is not None and names_file.exists() else NameTable()
    matches: list[Match] = []
    for json_path in json_paths:
        raw = json.loads(json_path.read_text(encoding="utf-8"))
        matches.extend(parse_tournament(raw, name_normalizer=name_table, echo=typer.echo))
    return matches


@app.command()
def show(
    json_paths: Annotated[
        list[Path] | None,
        typer.Argument(help="Raw tournament JSON files in play order. Reads the database when omitted."),
    ] = None,
    db_url: Annotated[
        str,
        typer.Option("--db-url", help="Database URL used when no JSON files are given."),
    ] = DEFAULT_DB_URL,
    season_id: Annotated[
        int | None,
        typer.Option("--season-id", help="Season to rate when reading the database."),
    ] = None,
    names_file: Annotated[
        Path | None,
        typer.Option("--names-file", help="TOML table of name normalizations."),
    ] = DEFAULT_NAMES_FILE,
    top_n: Annotated[
        int,
        typer.Option("--top-n", min=1, help="Number of players to print."),
    ] = 20,
) -> None:
    """Print the top players with rating, games and last change."""
    if json_paths:
        matches = _load_matches_from_files(json_paths, names_file)
    else:
        session_factory = create_session_factory(create_db_engine(db_url))
        with session_factory() as session:
            matches = fetch_season_matches(session, season_id)

    result = process_all_matches(matches)
    stats = calculate_stats(result.players, result.matches)
    typer.echo(
        f"total_games={stats.total_games} total_players={stats.total_players} "
        f"average_rating={stats.average_rating} calibrated_players={stats.calibrated_players}"
    )

    for rank, player in enumerate(result.players[:top_n], start=1):
        calibration = "" if player.is_calibrated else " (calibrating)"
        typer.echo(
            f"{rank:>3}. {player.id:<32} {player.current_rating:>7.0f} "
            f"{player.last_change:+d} games={player.games_played}{calibration}"
        )


if __name__ == "__main__":
    app()
