"""Elo ratings under the Davidson tie model.

Bradley-Terry strengths ``pi = 10^(R / 400)`` with a tie term proportional to
the geometric mean of the two strengths::

    P(White) = pi_w / (pi_w + pi_b + nu * sqrt(pi_w * pi_b))
    P(Draw)  = nu * sqrt(pi_w * pi_b) / (...)

so draws get their own probability mass instead of being folded into the
expected score. The update is Elo's, using ``P(White) + P(Draw) / 2`` as the
expected score, with a shared K.
"""

from __future__ import annotations

import math
from datetime import datetime

from ratingbench.core.config import DavidsonConfig
from ratingbench.core.constants import ELO_SCALE
from ratingbench.core.types import Outcome, Prediction
from ratingbench.models.elo import EloState, update_elo


def davidson_probabilities(
    rating_white: float, rating_black: float, nu: float
) -> tuple[float, float, float]:
    """
    Win/draw/loss probabilities for White.

    Parameters
    ----------
    rating_white, rating_black : float
        Elo-scale ratings.
    nu : float
        Draw propensity; 0 gives the plain logistic Elo curve.

    Returns
    -------
    tuple[float, float, float]
        (P(White wins), P(Draw), P(Black wins))
    """
    # Divide through by sqrt(pi_w * pi_b) to keep the powers small
    half_gap = (rating_white - rating_black) / (2.0 * ELO_SCALE)
    strength_white = math.pow(10.0, half_gap)
    strength_black = math.pow(10.0, -half_gap)
    total = strength_white + strength_black + nu
    return strength_white / total, nu / total, strength_black / total


class DavidsonEloModel:
    """Three-outcome Elo variant."""

    name = "elo-davidson"

    def __init__(self, config: DavidsonConfig | None = None) -> None:
        self.config = config or DavidsonConfig()
        if self.config.draw_nu < 0:
            raise ValueError(
                f"draw_nu must be non-negative, got {self.config.draw_nu}"
            )

    def default_state(self) -> EloState:
        return EloState(rating=self.config.initial_rating)

    def age(self, state: EloState, at: datetime | None) -> EloState:
        return state

    def predict(self, white: EloState, black: EloState) -> Prediction:
        p_white, p_draw, p_black = davidson_probabilities(
            white.rating, black.rating, self.config.draw_nu
        )
        return Prediction(white=p_white, draw=p_draw, black=p_black)

    def update(
        self,
        white: EloState,
        black: EloState,
        outcome: Outcome,
        at: datetime | None = None,
    ) -> tuple[EloState, EloState]:
        p_white, p_draw, _ = davidson_probabilities(
            white.rating, black.rating, self.config.draw_nu
        )
        expected_white = p_white + 0.5 * p_draw
        k = self.config.k_factor

        new_white = EloState(
            rating=update_elo(white.rating, expected_white, outcome.score, k),
            games=white.games + 1,
        )
        new_black = EloState(
            rating=update_elo(
                black.rating, 1.0 - expected_white, 1.0 - outcome.score, k
            ),
            games=black.games + 1,
        )
        return new_white, new_black

    def describe(self, state: EloState) -> dict[str, float]:
        return {"rating": state.rating, "games": state.games}
