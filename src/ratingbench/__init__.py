"""
Rating update and prediction evaluation over chronological game corpora.

Replays games one at a time through a rating model, scores every pre-game
prediction against the actual result, and reports accuracy per corpus
segment and over the whole run.
"""

from ratingbench.core import (
    GameRecord,
    Outcome,
    Prediction,
    RatingModel,
    ReplayConfig,
)
from ratingbench.evaluation import AccuracyAccumulator, AccuracySummary
from ratingbench.models import MODEL_NAMES, build_model
from ratingbench.replay import (
    ModelComparison,
    ReplayEngine,
    RunResult,
    SegmentSummary,
)
from ratingbench.store import RatingStore

__version__ = "0.1.0"

__all__ = [
    "AccuracyAccumulator",
    "AccuracySummary",
    "GameRecord",
    "MODEL_NAMES",
    "ModelComparison",
    "Outcome",
    "Prediction",
    "RatingModel",
    "RatingStore",
    "ReplayConfig",
    "ReplayEngine",
    "RunResult",
    "SegmentSummary",
    "build_model",
]
