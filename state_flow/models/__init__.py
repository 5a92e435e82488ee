"""Data models package."""

from .records import (
    AssertionRecord,
    FailureReport,
    MatchResult,
    Mismatch,
    RunStatus,
    StateTransition,
)

__all__ = [
    "RunStatus",
    "StateTransition",
    "Mismatch",
    "MatchResult",
    "AssertionRecord",
    "FailureReport",
]
