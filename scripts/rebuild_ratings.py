#!/usr/bin/env python3
"""Rebuild stored player Elo ratings from the imported matches."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import DEFAULT_DB_URL, create_db_engine, create_session_factory
from domain.pipeline import rebuild_player_elo
from domain.ratings.elo.config import load_elo_system_configs
from repositories.ratings.definitions import PLAYER_ELO_REPOSITORY

DEFAULT_CONFIG_DIR = ROOT_DIR / "configs" / "ratings" / "elo"

app = typer.Typer(
    add_completion=False,
    help="Rebuild player Elo rating events.",
)


@app.command()
def rebuild(
    db_url: Annotated[
        str,
        typer.Option("--db-url", help="Database URL. Defaults to the local SQLite file."),
    ] = DEFAULT_DB_URL,
    config_dir: Annotated[
        Path,
        typer.Option("--config-dir", help="Directory of Elo system TOML configs."),
    ] = DEFAULT_CONFIG_DIR,
    config_name: Annotated[
        str | None,
        typer.Option(
            "--config-name",
            help="Optional single config filename (for example: default.toml).",
        ),
    ] = None,
    season_id: Annotated[
        int | None,
        typer.Option("--season-id", help="Limit the rebuild to one season."),
    ] = None,
    batch_size: Annotated[
        int,
        typer.Option("--batch-size", help="Batch size for inserting rating events."),
    ] = 5000,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Compute ratings without writing events."),
    ] = False,
) -> None:
    """Rebuild every configured Elo system (or one of them)."""
    if batch_size <= 0:
        raise typer.BadParameter("--batch-size must be greater than 0")

    configs = load_elo_system_configs(config_dir)
    if config_name is not None:
        configs = [config for config in configs if config.file_path.name == config_name]
        if not configs:
            raise typer.BadParameter(
                f"No config named '{config_name}' found in {config_dir}",
                param_hint="--config-name",
            )

    engine = create_db_engine(db_url)
    PLAYER_ELO_REPOSITORY.ensure_schema(engine)
    session_factory = create_session_factory(engine)

    typer.echo(f"loaded_configs={len(configs)} config_dir={config_dir}")

    for config in configs:
        rebuild_player_elo(
            session_factory=session_factory,
            repository=PLAYER_ELO_REPOSITORY,
            system_config=config,
            season_id=season_id,
            batch_size=batch_size,
            dry_run=dry_run,
            echo=typer.echo,
        )


if __name__ == "__main__":
    app()
