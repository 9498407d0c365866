#!/usr/bin/env python3
"""Print group standings for one tournament, or season Italian-points totals."""

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
from domain.parsing import NameTable, parse_tournament, split_groups
from domain.standings.calculator import calculate_standings
from domain.standings.scoring import ScoringStrategy
from domain.standings.season import summarize_season
from repositories.tournament_repository import fetch_season_matches

DEFAULT_NAMES_FILE = ROOT_DIR / "configs" / "names.toml"

app = typer.Typer(
    add_completion=False,
    help="Show qualification group standings and season totals.",
)


@app.command()
def show(
    json_path: Annotated[Path, typer.Argument(help="Raw tournament JSON file.")],
    strategy: Annotated[
        ScoringStrategy,
        typer.Option("--strategy", help="Ranking strategy (italian, win_loss)."),
    ] = ScoringStrategy.ITALIAN,
    league: Annotated[
        str | None,
        typer.Option("--league", help="Only show groups of this league."),
    ] = None,
    names_file: Annotated[
        Path | None,
        typer.Option("--names-file", help="TOML table of name normalizations."),
    ] = DEFAULT_NAMES_FILE,
) -> None:
    """Print one table per (league, group)."""
    raw = json.loads(json_path.read_text(encoding="utf-8"))
    name_table = NameTable.from_toml(names_file) if names_file is not None and names_file.exists() else NameTable()
    matches = parse_tournament(raw, name_normalizer=name_table)

    groups = split_groups(matches)
    if league is not None:
        groups = {key: value for key, value in groups.items() if key[0] == league}
        if not groups:
            raise typer.BadParameter(f"No groups found for league '{league}'", param_hint="--league")

    for (league_name, group_name), group_matches in groups.items():
        typer.echo(f"{league_name} / {group_name} ({len(group_matches)} matches, strategy={strategy.value})")
        for row in calculate_standings(group_matches, strategy):
            typer.echo(
                f"{row.rank:>3}. {row.player_id:<32} games={row.games} wins={row.wins} "
                f"losses={row.losses} points={row.italian_points} "
                f"for={row.points_for} against={row.points_against} diff={row.points_diff:+d}"
            )
        typer.echo("")


@app.command()
def season(
    db_url: Annotated[
        str,
        typer.Option("--db-url", help="Database URL. Defaults to the local SQLite file."),
    ] = DEFAULT_DB_URL,
    season_id: Annotated[
        int | None,
        typer.Option("--season-id", help="Season to summarize; all seasons when omitted."),
    ] = None,
    top_n: Annotated[
        int,
        typer.Option("--top-n", min=1, help="Number of players to print."),
    ] = 30,
) -> None:
    """Print season Italian-points totals per tournament stage."""
    session_factory = create_session_factory(create_db_engine(db_url))
    with session_factory() as session:
        matches = fetch_season_matches(session, season_id)

    summaries = summarize_season(matches)
    typer.echo(f"matches={len(matches)} players={len(summaries)}")
    for rank, summary in enumerate(summaries[:top_n], start=1):
        stages = " ".join(f"{stage}={tally.points}" for stage, tally in summary.stages.items())
        typer.echo(f"{rank:>3}. {summary.player_id:<32} total={summary.total} {stages}")


if __name__ == "__main__":
    app()
