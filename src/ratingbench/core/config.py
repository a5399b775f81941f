"""Configuration dataclasses for rating models and corpus replay."""

from dataclasses import dataclass, field
from typing import Optional

from ratingbench.core.constants import (
    DEFAULT_CALIBRATION_BINS,
    DEFAULT_DRAW_NU,
    DEFAULT_K_FACTOR,
    DEFAULT_PREFETCH_SIZE,
    DEFAULT_RATING,
    DEFAULT_RD,
    DEFAULT_SCORING_RULE,
    DEFAULT_TAU,
    DEFAULT_VOLATILITY,
)


@dataclass
class EloConfig:
    """Configuration for the classical Elo updater."""

    initial_rating: float = DEFAULT_RATING
    k_factor: float = DEFAULT_K_FACTOR

    # Players with fewer games than this use provisional_k instead
    provisional_games: int = 0
    provisional_k: Optional[float] = None

    def k_for(self, games: int) -> float:
        """K-factor for a player with ``games`` completed games."""
        if games < self.provisional_games and self.provisional_k is not None:
            return self.provisional_k
        return self.k_factor


@dataclass
class DavidsonConfig:
    """Configuration for Elo with a Davidson draw term."""

    initial_rating: float = DEFAULT_RATING
    k_factor: float = DEFAULT_K_FACTOR
    draw_nu: float = DEFAULT_DRAW_NU


@dataclass
class GlickoConfig:
    """Configuration for Glicko-1."""

    initial_rating: float = DEFAULT_RATING
    initial_rd: float = DEFAULT_RD


@dataclass
class Glicko2Config:
    """Configuration for Glicko-2.

    ``rating_period_days`` of None treats every game as its own rating
    period. A positive value scales RD inflation by elapsed wall-clock time
    and turns on the RD/volatility clamps.
    """

    initial_rating: float = DEFAULT_RATING
    initial_rd: float = DEFAULT_RD
    initial_volatility: float = DEFAULT_VOLATILITY
    tau: float = DEFAULT_TAU
    rating_period_days: Optional[float] = None


@dataclass
class ScoringConfig:
    """Configuration for prediction scoring."""

    rule: str = DEFAULT_SCORING_RULE  # "log_loss", "brier" or "hit_rate"
    calibration_bins: int = DEFAULT_CALIBRATION_BINS


@dataclass
class IngestConfig:
    """Eligibility policy applied while decoding the corpus."""

    time_controls: tuple[str, ...] = ("blitz",)
    rated_only: bool = True


@dataclass
class ReplayConfig:
    """Configuration for a full replay run."""

    # Model selection, see ratingbench.models.MODEL_NAMES
    models: tuple[str, ...] = ("elo",)

    # Model-specific configs
    elo: EloConfig = field(default_factory=EloConfig)
    davidson: DavidsonConfig = field(default_factory=DavidsonConfig)
    glicko: GlickoConfig = field(default_factory=GlickoConfig)
    glicko2: Glicko2Config = field(default_factory=Glicko2Config)

    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    ingest: IngestConfig = field(default_factory=IngestConfig)

    # Memory budget: maximum distinct players per store (None = unbounded)
    max_players: Optional[int] = None

    # Decoded records buffered ahead of the replay thread (0 = no prefetch)
    prefetch_size: int = DEFAULT_PREFETCH_SIZE
