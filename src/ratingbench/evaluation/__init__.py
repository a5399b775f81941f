"""Evaluation module for rating model predictions."""

from ratingbench.evaluation.accumulator import (
    AccuracyAccumulator,
    AccuracySummary,
)
from ratingbench.evaluation.loss import (
    SCORING_RULES,
    brier,
    favourite_score,
    hit,
    reference_hit,
    log_loss,
)
from ratingbench.evaluation.metrics import (
    calibration_frame,
    expected_calibration_error,
)

__all__ = [
    # Accumulation
    "AccuracyAccumulator",
    "AccuracySummary",
    # Scoring rules
    "SCORING_RULES",
    "brier",
    "favourite_score",
    "hit",
    "reference_hit",
    "log_loss",
    # Calibration
    "calibration_frame",
    "expected_calibration_error",
]
