"""Per-match scoring rules and ranking strategies for group standings."""

from __future__ import annotations

from enum import Enum

BALANCED_MARGIN = 2


class ScoringStrategy(str, Enum):
    """Primary ranking key of a standings table; points difference breaks ties."""

    ITALIAN = "italian"
    WIN_LOSS = "win_loss"


def italian_points(my_score: int, opponent_score: int) -> int:
    """Italian-system points for one side of a decided match.

    A win by exactly two earns 2 and any other win 3; a loss by exactly
    two earns 1 and any other loss 0.
    """
    balanced = abs(my_score - opponent_score) == BALANCED_MARGIN
    if my_score > opponent_score:
        return 2 if balanced else 3
    return 1 if balanced else 0


__all__ = ["BALANCED_MARGIN", "ScoringStrategy", "italian_points"]
