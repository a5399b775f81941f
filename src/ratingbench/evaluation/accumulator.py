"""Running prediction scores for one corpus segment."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass

import numpy as np
import polars as pl

from ratingbench.core.config import ScoringConfig
from ratingbench.core.types import Outcome, Prediction
from ratingbench.evaluation.loss import (
    SCORING_RULES,
    brier,
    hit,
    log_loss,
    reference_hit,
)
from ratingbench.evaluation.metrics import (
    calibration_frame,
    expected_calibration_error,
)


@dataclass(frozen=True)
class AccuracySummary:
    """Read-out of an accumulator.

    ``mean_loss`` is the mean of the configured ``scoring_rule``; the
    individual rules are always reported as well, together with the
    calibration error of the binned predictions. Means are NaN when no
    prediction was recorded.

    ``reference_hit_rate`` scores the baseline that backs the player with
    the higher rating in the game headers, over the ``reference_count``
    games that carry both ratings.
    """

    count: int
    mean_loss: float
    scoring_rule: str
    log_loss: float
    brier: float
    hit_rate: float
    calibration_error: float
    reference_count: int
    reference_hit_rate: float

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return asdict(self)


class AccuracyAccumulator:
    """
    Accumulates scoring statistics over (prediction, outcome) pairs.

    Totals are plain float sums so that the reported mean equals the
    arithmetic mean of the per-game scores. Calibration is tracked in
    equal-width bins over White's expected score.
    """

    def __init__(self, config: ScoringConfig | None = None):
        self.config = config or ScoringConfig()
        if self.config.rule not in SCORING_RULES:
            raise ValueError(
                f"Unknown scoring rule {self.config.rule!r}; "
                f"choose from {', '.join(SCORING_RULES)}"
            )
        if self.config.calibration_bins < 1:
            raise ValueError(
                "calibration_bins must be at least 1, "
                f"got {self.config.calibration_bins}"
            )
        self.reset()

    def reset(self) -> None:
        """Zero all totals."""
        bins = self.config.calibration_bins
        self.count = 0
        self.log_loss_total = 0.0
        self.brier_total = 0.0
        self.hits = 0.0
        self.reference_count = 0
        self.reference_hits = 0.0
        self.bin_counts = np.zeros(bins, dtype=np.int64)
        self.bin_predicted = np.zeros(bins, dtype=np.float64)
        self.bin_observed = np.zeros(bins, dtype=np.float64)

    def check(self, prediction: Prediction, outcome: Outcome) -> float:
        """
        Validate a prediction without recording it.

        Returns:
            The log loss of the prediction.

        Raises:
            ModelContractError: If the prediction is not a distribution or
                gives the actual result zero probability.
        """
        prediction.validate()
        return log_loss(prediction, outcome)

    def record(self, prediction: Prediction, outcome: Outcome) -> None:
        """Score one prediction and add it to the totals."""
        loss = self.check(prediction, outcome)

        self.count += 1
        self.log_loss_total += loss
        self.brier_total += brier(prediction, outcome)
        self.hits += hit(prediction, outcome)

        bins = self.config.calibration_bins
        expected = prediction.expected_score
        index = min(int(expected * bins), bins - 1)
        self.bin_counts[index] += 1
        self.bin_predicted[index] += expected
        self.bin_observed[index] += outcome.score

    def record_reference(
        self, white_elo: int, black_elo: int, outcome: Outcome
    ) -> None:
        """Score the header-rating baseline on one game."""
        self.reference_count += 1
        self.reference_hits += reference_hit(white_elo, black_elo, outcome)

    def _mean(self, total: float, count: int | None = None) -> float:
        count = self.count if count is None else count
        return total / count if count else math.nan

    def summary(self) -> AccuracySummary:
        """Current totals as means."""
        means = {
            "log_loss": self._mean(self.log_loss_total),
            "brier": self._mean(self.brier_total),
            "hit_rate": self._mean(self.hits),
        }
        return AccuracySummary(
            count=self.count,
            mean_loss=means[self.config.rule],
            scoring_rule=self.config.rule,
            calibration_error=expected_calibration_error(
                self.calibration_frame()
            ),
            reference_count=self.reference_count,
            reference_hit_rate=self._mean(
                self.reference_hits, self.reference_count
            ),
            **means,
        )

    def calibration_frame(self) -> pl.DataFrame:
        """Per-bin calibration table, see ``metrics.calibration_frame``."""
        return calibration_frame(
            self.bin_counts, self.bin_predicted, self.bin_observed
        )
