"""Load Elo system definitions from TOML files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from domain.config_base import BaseSystemConfig, load_system_configs
from domain.ratings.elo.calculator import (
    CALIBRATION_GAMES,
    INITIAL_RATING,
    K_FACTOR_CALIBRATION,
    K_FACTOR_DEFAULT,
    SCALE_FACTOR,
    EloParameters,
)


@dataclass(frozen=True)
class EloSystemConfig(BaseSystemConfig):
    """Configuration for one player Elo rebuild."""

    parameters: EloParameters

    def as_config_json(self) -> dict[str, Any]:
        return {
            "initial_elo": self.parameters.initial_elo,
            "k_factor": self.parameters.k_factor,
            "calibration_k_factor": self.parameters.calibration_k_factor,
            "calibration_games": self.parameters.calibration_games,
            "scale_factor": self.parameters.scale_factor,
        }


def load_elo_system_configs(config_dir: Path) -> list[EloSystemConfig]:
    """Load and validate all Elo system TOML config files in a directory."""
    return load_system_configs(
        config_dir,
        _parse_elo_system_config,
        duplicate_name_label="elo",
    )


def _parse_elo_system_config(raw: dict[str, Any], file_path: Path) -> EloSystemConfig:
    system_raw = raw.get("system", {})
    elo_raw = raw.get("elo", {})

    name = str(system_raw.get("name", "")).strip()
    if not name:
        raise ValueError(f"{file_path}: [system].name is required")

    description_value = system_raw.get("description")
    description = None if description_value is None else str(description_value)

    parameters = EloParameters(
        initial_elo=float(elo_raw.get("initial_elo", INITIAL_RATING)),
        k_factor=float(elo_raw.get("k_factor", K_FACTOR_DEFAULT)),
        calibration_k_factor=float(elo_raw.get("calibration_k_factor", K_FACTOR_CALIBRATION)),
        calibration_games=int(elo_raw.get("calibration_games", CALIBRATION_GAMES)),
        scale_factor=float(elo_raw.get("scale_factor", SCALE_FACTOR)),
    )
    _validate_parameters(file_path=file_path, parameters=parameters)

    return EloSystemConfig(
        name=name,
        description=description,
        file_path=file_path,
        parameters=parameters,
    )


def _validate_parameters(*, file_path: Path, parameters: EloParameters) -> None:
    if parameters.initial_elo <= 0.0:
        raise ValueError(f"{file_path}: [elo].initial_elo must be > 0")
    if parameters.k_factor <= 0.0:
        raise ValueError(f"{file_path}: [elo].k_factor must be > 0")
    if parameters.calibration_k_factor <= 0.0:
        raise ValueError(f"{file_path}: [elo].calibration_k_factor must be > 0")
    if parameters.calibration_games < 0:
        raise ValueError(f"{file_path}: [elo].calibration_games must be >= 0")
    if parameters.scale_factor <= 0.0:
        raise ValueError(f"{file_path}: [elo].scale_factor must be > 0")
