"""Error taxonomy for corpus replay."""

from __future__ import annotations


class RatingBenchError(Exception):
    """Base class for all ratingbench errors."""


class MalformedRecordError(RatingBenchError, ValueError):
    """A game record cannot be replayed; the record is skipped.

    ``reason`` is a short stable key used for the per-segment skip counts.
    """

    def __init__(self, reason: str, message: str | None = None) -> None:
        self.reason = reason
        super().__init__(message or reason)


class ModelContractError(RatingBenchError, RuntimeError):
    """A rating model produced an invalid prediction. Fatal to the run."""


class CapacityExceededError(RatingBenchError, RuntimeError):
    """The rating store reached its configured player budget. Fatal."""

    def __init__(self, limit: int, player: object) -> None:
        self.limit = limit
        self.player = player
        super().__init__(
            f"Player budget of {limit:,} exhausted while adding {player!r}"
        )


class EngineStateError(RatingBenchError, RuntimeError):
    """A replay hook was called in the wrong engine state."""
