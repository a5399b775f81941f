"""Protocol definitions for pluggable rating models."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import datetime

    from ratingbench.core.types import Outcome, Prediction


@runtime_checkable
class RatingModel(Protocol):
    """Protocol for rating update algorithms.

    This allows the replay engine to compare different rating systems
    (Elo, Glicko, Glicko-2, ...) over the same corpus. Every method is a pure
    function of its arguments; the rating state is an opaque, immutable
    per-model payload owned by the store.
    """

    name: str

    def default_state(self) -> Any:
        """State given to a player on first appearance."""
        ...

    def age(self, state: Any, at: datetime | None) -> Any:
        """Adjust a state for inactivity up to ``at``.

        Args:
            state: Stored state of one player.
            at: Time of the game about to be played, or None if unknown.

        Returns:
            State to predict and update from. Models without a notion of
            time return ``state`` unchanged.
        """
        ...

    def predict(self, white: Any, black: Any) -> Prediction:
        """Distribution over the result of a game between two states."""
        ...

    def update(
        self,
        white: Any,
        black: Any,
        outcome: Outcome,
        at: datetime | None = None,
    ) -> tuple[Any, Any]:
        """Post-game states, both computed from the pre-game states."""
        ...

    def describe(self, state: Any) -> dict[str, float]:
        """Flat numeric view of a state for reports."""
        ...
