"""Rating and standings domain modules."""

from domain.common import Match, PreconditionViolation, validate_match

__all__ = ["Match", "PreconditionViolation", "validate_match"]
