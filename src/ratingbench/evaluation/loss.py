"""
Scoring rules for pre-game predictions.

Every rule takes one :class:`Prediction` and the actual :class:`Outcome`.
Unlike probability clipping, a prediction that gives the actual result zero
probability raises :class:`ModelContractError`: clamping would hide model
bugs and skew comparisons between models.

Draws against two-outcome predictions are scored on the expected score: the
log loss is the cross-entropy between the predicted win probability ``p``
and the half point, ``-(ln p + ln(1 - p)) / 2``. Decisive games reduce to
``-ln p(actual)`` under both conventions.
"""

from __future__ import annotations

import math
from typing import Callable

from ratingbench.core.exceptions import ModelContractError
from ratingbench.core.types import Outcome, Prediction


def _neg_log(p: float, prediction: Prediction, outcome: Outcome) -> float:
    if p <= 0.0:
        raise ModelContractError(
            f"Zero probability assigned to actual result {outcome.name}: "
            f"{prediction}"
        )
    return -math.log(p)


def log_loss(prediction: Prediction, outcome: Outcome) -> float:
    """
    Cross-entropy of one prediction.

    Parameters
    ----------
    prediction : Prediction
        Pre-game distribution
    outcome : Outcome
        Actual result

    Returns
    -------
    float
        Negative log-likelihood of the actual result
    """
    if prediction.two_outcome and outcome is Outcome.DRAW:
        return 0.5 * (
            _neg_log(prediction.white, prediction, outcome)
            + _neg_log(prediction.black, prediction, outcome)
        )
    return _neg_log(prediction.probability_of(outcome), prediction, outcome)


def brier(prediction: Prediction, outcome: Outcome) -> float:
    """Squared error between expected and actual score for White."""
    return (outcome.score - prediction.expected_score) ** 2


def _favourite(white: float, black: float) -> float:
    if white > black:
        return 1.0
    if white < black:
        return 0.0
    return 0.5


def favourite_score(prediction: Prediction) -> float:
    """White's score if the favourite wins: 1, 0, or 0.5 for no favourite."""
    return _favourite(prediction.white, prediction.black)


def hit(prediction: Prediction, outcome: Outcome) -> float:
    """1.0 if the favourite (or a draw, when there is none) was right."""
    return float(abs(outcome.score - favourite_score(prediction)) < 0.5)


def reference_hit(white_elo: int, black_elo: int, outcome: Outcome) -> float:
    """
    Hit of the baseline that backs the higher header rating.

    Equal ratings predict a draw, like :func:`hit` does for an even
    prediction.
    """
    return float(abs(outcome.score - _favourite(white_elo, black_elo)) < 0.5)


SCORING_RULES: dict[str, Callable[[Prediction, Outcome], float]] = {
    "log_loss": log_loss,
    "brier": brier,
    "hit_rate": hit,
}
