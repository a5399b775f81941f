"""Value types shared by the replay engine, the models and the scorers."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Union

from ratingbench.core.constants import PROBABILITY_TOLERANCE
from ratingbench.core.exceptions import MalformedRecordError, ModelContractError

PlayerId = Union[str, int]


class Outcome(Enum):
    """Game result from White's point of view."""

    WHITE_WIN = "1-0"
    BLACK_WIN = "0-1"
    DRAW = "1/2-1/2"

    @property
    def score(self) -> float:
        """White's score: 1 for a win, 0.5 for a draw, 0 for a loss."""
        if self is Outcome.WHITE_WIN:
            return 1.0
        if self is Outcome.BLACK_WIN:
            return 0.0
        return 0.5

    @classmethod
    def from_result(cls, token: str) -> Outcome:
        """Parse a PGN ``Result`` token."""
        try:
            return cls(token.strip())
        except ValueError:
            raise MalformedRecordError(
                "unrecognized_outcome", f"Unrecognized result {token!r}"
            ) from None

    @classmethod
    def coerce(cls, value: Any) -> Outcome:
        """Accept an Outcome, its name or a PGN result token."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            if value in cls.__members__:
                return cls[value]
            return cls.from_result(value)
        raise MalformedRecordError(
            "unrecognized_outcome", f"Unrecognized result {value!r}"
        )


@dataclass(frozen=True)
class GameRecord:
    """One eligible game, as supplied by the corpus decoder.

    ``result`` is normally an :class:`Outcome`; raw tokens are accepted and
    validated by the engine so that unreadable results are counted as skips
    instead of aborting the decoder.
    """

    white: PlayerId
    black: PlayerId
    result: Outcome | str
    sequence_key: Any = None
    played_at: datetime | None = None
    event: str | None = None
    white_elo: int | None = None
    black_elo: int | None = None


@dataclass(frozen=True)
class Prediction:
    """Pre-game probability distribution over the three results.

    Two-outcome models only estimate White's expected score; they are built
    with :meth:`from_expected_score`, carry no draw mass and set
    ``two_outcome``.
    """

    white: float
    draw: float
    black: float
    two_outcome: bool = False

    @classmethod
    def from_expected_score(cls, p_white: float) -> Prediction:
        """Two-outcome prediction where White wins with ``p_white``."""
        return cls(
            white=p_white, draw=0.0, black=1.0 - p_white, two_outcome=True
        )

    @property
    def expected_score(self) -> float:
        """Expected score for White."""
        return self.white + 0.5 * self.draw

    def probability_of(self, outcome: Outcome) -> float:
        if outcome is Outcome.WHITE_WIN:
            return self.white
        if outcome is Outcome.BLACK_WIN:
            return self.black
        return self.draw

    def validate(self, tolerance: float = PROBABILITY_TOLERANCE) -> None:
        """Raise ModelContractError unless this is a proper distribution."""
        components = (self.white, self.draw, self.black)
        if not all(math.isfinite(c) for c in components):
            raise ModelContractError(f"Non-finite prediction {self}")
        if any(c < 0.0 for c in components):
            raise ModelContractError(f"Negative probability in {self}")
        total = sum(components)
        if abs(total - 1.0) > tolerance:
            raise ModelContractError(
                f"Prediction sums to {total:.9f}, not 1: {self}"
            )
        if self.two_outcome and self.draw != 0.0:
            raise ModelContractError(
                f"Two-outcome prediction carries draw mass: {self}"
            )
