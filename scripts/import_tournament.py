#!/usr/bin/env python3
"""Import one raw tournament JSON file into the database."""

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
from domain.common import PreconditionViolation
from domain.parsing import NameTable
from repositories.ratings.definitions import ensure_player_elo_schema
from repositories.tournament_repository import import_tournament

DEFAULT_NAMES_FILE = ROOT_DIR / "configs" / "names.toml"
TOURNAMENT_FORMATS = ("mixed", "same_sex")
PAIRINGS = ("random", "fixed")

app = typer.Typer(
    add_completion=False,
    help="Import tournament results.",
)


@app.command()
def run(
    json_path: Annotated[Path, typer.Argument(help="Raw tournament JSON file.")],
    season_name: Annotated[str, typer.Option("--season-name", help="Season name.")],
    season_year: Annotated[int, typer.Option("--season-year", help="Season year.")],
    stage_number: Annotated[
        int | None,
        typer.Option("--stage-number", help="Stage number within the season; omit for the final."),
    ] = None,
    tournament_format: Annotated[
        str,
        typer.Option("--format", help="Tournament format (mixed, same_sex)."),
    ] = "mixed",
    pairing: Annotated[
        str,
        typer.Option("--pairing", help="Partner pairing (random, fixed)."),
    ] = "random",
    names_file: Annotated[
        Path | None,
        typer.Option("--names-file", help="TOML table of name normalizations."),
    ] = DEFAULT_NAMES_FILE,
    db_url: Annotated[
        str,
        typer.Option("--db-url", help="Database URL. Defaults to the local SQLite file."),
    ] = DEFAULT_DB_URL,
) -> None:
    """Store the tournament, its leagues, groups, playoff and players."""
    if tournament_format not in TOURNAMENT_FORMATS:
        raise typer.BadParameter(
            f"Unsupported format '{tournament_format}'. Choose one of: {', '.join(TOURNAMENT_FORMATS)}.",
            param_hint="--format",
        )
    if pairing not in PAIRINGS:
        raise typer.BadParameter(
            f"Unsupported pairing '{pairing}'. Choose one of: {', '.join(PAIRINGS)}.",
            param_hint="--pairing",
        )

    raw = json.loads(json_path.read_text(encoding="utf-8"))
    name_table = NameTable.from_toml(names_file) if names_file is not None and names_file.exists() else NameTable()

    engine = create_db_engine(db_url)
    ensure_player_elo_schema(engine)
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        try:
            import_tournament(
                session,
                raw,
                season_name=season_name,
                season_year=season_year,
                stage_number=stage_number,
                tournament_format=tournament_format,
                pairing=pairing,
                name_normalizer=name_table,
                echo=typer.echo,
            )
            session.commit()
        except PreconditionViolation as exc:
            session.rollback()
            raise typer.BadParameter(str(exc), param_hint="json_path") from exc
        except Exception:
            session.rollback()
            raise


if __name__ == "__main__":
    app()
