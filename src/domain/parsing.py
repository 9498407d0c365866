"""Turn raw nested tournament JSON into ordered, validated match records."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from datetime import date
from pathlib import Path
from typing import Any

from domain.common import (
    PLAYOFF_STAGE,
    QUALIFICATION_STAGE,
    Match,
    PreconditionViolation,
    validate_match,
)
from domain.config_base import read_toml

NameNormalizer = Callable[[str], str]

_WHITESPACE = re.compile(r"\s+")


class NameTable:
    """Caller-owned mapping from abbreviated player names to canonical ones."""

    def __init__(self, aliases: Mapping[str, str] | None = None) -> None:
        self.aliases = dict(aliases or {})

    def __call__(self, name: str) -> str:
        return self.aliases.get(name, name)

    @classmethod
    def from_toml(cls, file_path: Path) -> NameTable:
        raw = read_toml(file_path)
        names_raw = raw.get("names", {})
        if not isinstance(names_raw, dict):
            raise ValueError(f"{file_path}: [names] must be a table")
        return cls({str(alias): str(name) for alias, name in names_raw.items()})


def slugify(value: str) -> str:
    return _WHITESPACE.sub("-", value.strip().lower())


def generate_match_id(tournament: str, league: str, group: str, match_id: str | int) -> str:
    """Globally unique id built from the match's position in the tournament."""
    return f"{slugify(tournament)}_{slugify(league)}_{group}_{match_id}"


def _parse_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError as exc:
        raise PreconditionViolation(f"invalid tournament date {value!r}") from exc


def _build_match(
    raw_match: Mapping[str, Any],
    *,
    tournament: str,
    event_date: date,
    league: str,
    group: str,
    stage: str,
    normalize: NameNormalizer,
) -> Match:
    try:
        team1 = tuple(normalize(str(name)) for name in raw_match["team1"])
        team2 = tuple(normalize(str(name)) for name in raw_match["team2"])
        score = tuple(raw_match["score"])
        raw_id = raw_match["id"]
    except (KeyError, TypeError) as exc:
        raise PreconditionViolation(
            f"malformed match in league={league} group={group}: {raw_match!r}"
        ) from exc

    match = Match(
        id=generate_match_id(tournament, league, group, raw_id),
        date=event_date,
        team1=team1,  # type: ignore[arg-type]
        team2=team2,  # type: ignore[arg-type]
        score=score,  # type: ignore[arg-type]
        tournament=tournament,
        league=league,
        group=group,
        stage=stage,
        round=raw_match.get("round") if stage == PLAYOFF_STAGE else None,
        court=raw_match.get("court"),
    )
    validate_match(match)
    return match


def _is_draw(raw_match: Mapping[str, Any]) -> bool:
    score = raw_match.get("score")
    return isinstance(score, (list, tuple)) and len(score) == 2 and score[0] == score[1]


def parse_tournament(
    raw: Mapping[str, Any],
    *,
    name_normalizer: NameNormalizer | None = None,
    echo: Callable[[str], None] | None = None,
) -> list[Match]:
    """Extract every decided match in processing order.

    Leagues keep their listed order; within a league all group matches
    come first, then the playoff. Draws are skipped.
    """
    normalize = name_normalizer or NameTable()
    tournament = str(raw["tournament"])
    event_date = _parse_date(raw["date"])

    matches: list[Match] = []
    skipped_draws = 0

    def collect(raw_matches: Iterable[Mapping[str, Any]], *, league: str, group: str, stage: str) -> None:
        nonlocal skipped_draws
        for raw_match in raw_matches:
            if _is_draw(raw_match):
                skipped_draws += 1
                if echo is not None:
                    echo(
                        f"skipping draw league={league} group={group} "
                        f"match={raw_match.get('id')} score={raw_match['score'][0]}-{raw_match['score'][1]}"
                    )
                continue
            matches.append(
                _build_match(
                    raw_match,
                    tournament=tournament,
                    event_date=event_date,
                    league=league,
                    group=group,
                    stage=stage,
                    normalize=normalize,
                )
            )

    for league_raw in raw.get("leagues", []):
        league = str(league_raw["name"])
        for group_raw in league_raw.get("groups", []):
            collect(
                group_raw.get("matches", []),
                league=league,
                group=str(group_raw["name"]),
                stage=group_raw.get("stage") or QUALIFICATION_STAGE,
            )

        playoff_raw = league_raw.get("playoff") or {}
        collect(
            playoff_raw.get("matches", []),
            league=league,
            group=PLAYOFF_STAGE,
            stage=PLAYOFF_STAGE,
        )

    if echo is not None:
        echo(
            f"parsed tournament={tournament} date={event_date.isoformat()} "
            f"matches={len(matches)} skipped_draws={skipped_draws}"
        )
    return matches


def split_groups(matches: Iterable[Match]) -> dict[tuple[str | None, str | None], list[Match]]:
    """Bucket qualification matches by (league, group); playoff matches are left out."""
    groups: dict[tuple[str | None, str | None], list[Match]] = {}
    for match in matches:
        if match.is_playoff:
            continue
        groups.setdefault((match.league, match.group), []).append(match)
    return groups


__all__ = [
    "NameNormalizer",
    "NameTable",
    "generate_match_id",
    "parse_tournament",
    "slugify",
    "split_groups",
]
