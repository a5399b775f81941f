"""
Classical Elo paired-comparison rating.

Expected score for A against B is ``1 / (1 + 10^((R_B - R_A) / 400))``. After
a game each rating moves by ``K * (S - E)``; with a shared K the two moves
are equal and opposite.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime

from ratingbench.core.config import EloConfig
from ratingbench.core.constants import ELO_SCALE
from ratingbench.core.types import Outcome, Prediction


def expected_score(rating_a: float, rating_b: float) -> float:
    """
    Calculate the expected score for player A against player B.

    Args:
        rating_a: Elo rating of player A
        rating_b: Elo rating of player B

    Returns:
        Expected score for player A (between 0 and 1)
    """
    return 1.0 / (1.0 + math.pow(10.0, (rating_b - rating_a) / ELO_SCALE))


def update_elo(
    rating: float, expected: float, actual: float, k_factor: float
) -> float:
    """
    Update an Elo rating based on the expected and actual outcomes.

    Args:
        rating: Current Elo rating
        expected: Expected outcome (between 0 and 1)
        actual: Actual outcome (0 for loss, 0.5 for draw, 1 for win)
        k_factor: K-factor (how far a single game moves the rating)

    Returns:
        Updated Elo rating
    """
    return rating + k_factor * (actual - expected)


@dataclass(frozen=True)
class EloState:
    """Elo rating plus the number of games it is based on."""

    rating: float
    games: int = 0


class EloModel:
    """Two-outcome Elo updater.

    Ratings are unbounded. When ``provisional_games`` is set, a player's K
    depends on their own game count, so the two deltas of a game are only
    mirror images while both players are on the same K.
    """

    name = "elo"

    def __init__(self, config: EloConfig | None = None) -> None:
        self.config = config or EloConfig()

    def default_state(self) -> EloState:
        return EloState(rating=self.config.initial_rating)

    def age(self, state: EloState, at: datetime | None) -> EloState:
        return state

    def predict(self, white: EloState, black: EloState) -> Prediction:
        return Prediction.from_expected_score(
            expected_score(white.rating, black.rating)
        )

    def update(
        self,
        white: EloState,
        black: EloState,
        outcome: Outcome,
        at: datetime | None = None,
    ) -> tuple[EloState, EloState]:
        expected_white = expected_score(white.rating, black.rating)
        expected_black = 1.0 - expected_white
        score_white = outcome.score

        new_white = EloState(
            rating=update_elo(
                white.rating,
                expected_white,
                score_white,
                self.config.k_for(white.games),
            ),
            games=white.games + 1,
        )
        new_black = EloState(
            rating=update_elo(
                black.rating,
                expected_black,
                1.0 - score_white,
                self.config.k_for(black.games),
            ),
            games=black.games + 1,
        )
        return new_white, new_black

    def describe(self, state: EloState) -> dict[str, float]:
        return {"rating": state.rating, "games": state.games}
