"""Corpus replay: the sequential engine and its drivers."""

from ratingbench.replay.compare import ModelComparison
from ratingbench.replay.engine import (
    EngineState,
    ReplayEngine,
    format_summary,
    validate_record,
)
from ratingbench.replay.prefetch import prefetch
from ratingbench.replay.results import RunResult, SegmentSummary

__all__ = [
    "EngineState",
    "ModelComparison",
    "ReplayEngine",
    "RunResult",
    "SegmentSummary",
    "format_summary",
    "prefetch",
    "validate_record",
]
