"""Core types, configuration and protocols for rating replay."""

from ratingbench.core.config import (
    DavidsonConfig,
    EloConfig,
    Glicko2Config,
    GlickoConfig,
    IngestConfig,
    ReplayConfig,
    ScoringConfig,
)
from ratingbench.core.exceptions import (
    CapacityExceededError,
    EngineStateError,
    MalformedRecordError,
    ModelContractError,
    RatingBenchError,
)
from ratingbench.core.protocols import RatingModel
from ratingbench.core.types import GameRecord, Outcome, PlayerId, Prediction

__all__ = [
    # Config
    "DavidsonConfig",
    "EloConfig",
    "Glicko2Config",
    "GlickoConfig",
    "IngestConfig",
    "ReplayConfig",
    "ScoringConfig",
    # Errors
    "CapacityExceededError",
    "EngineStateError",
    "MalformedRecordError",
    "ModelContractError",
    "RatingBenchError",
    # Protocols
    "RatingModel",
    # Types
    "GameRecord",
    "Outcome",
    "PlayerId",
    "Prediction",
]
