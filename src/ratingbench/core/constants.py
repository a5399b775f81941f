"""
Default parameters for rating models, scoring and corpus replay.

This module centralizes all default parameters used by the rating models and
the replay engine to ensure consistency and easy tuning.
"""

import math

# =============================================================================
# Elo Parameters
# =============================================================================

DEFAULT_RATING: float = 1500.0
DEFAULT_K_FACTOR: float = 32.0

# Logistic scale: a 400 point gap means 10:1 odds
ELO_SCALE: float = 400.0

# Davidson draw parameter (nu = 0 recovers plain two-outcome Elo)
DEFAULT_DRAW_NU: float = 0.5

# =============================================================================
# Glicko Parameters
# =============================================================================

DEFAULT_RD: float = 350.0
MAX_RD: float = 350.0
MIN_RD: float = 30.0

# A rated-once player decays back to RD 350 after this many days:
# c = sqrt((350^2 - 50^2) / 1825) ~= 8.11
DAYS_UNTIL_UNRATED: float = 5.0 * 365.0
GLICKO_C_SQUARED: float = ((350.0**2) - (50.0**2)) / DAYS_UNTIL_UNRATED

# ln(10) / 400
GLICKO_Q: float = math.log(10.0) / ELO_SCALE

# =============================================================================
# Glicko-2 Parameters
# =============================================================================

GLICKO2_SCALE: float = 173.7178
DEFAULT_VOLATILITY: float = 0.06
DEFAULT_TAU: float = 0.75
GLICKO2_CONVERGENCE_TOLERANCE: float = 1e-6

# Chosen so a typical player's RD goes from 60 to 110 in one year
DEFAULT_RATING_PERIOD_DAYS: float = 4.665
TIMED_MIN_RD: float = 60.0
TIMED_MAX_VOLATILITY: float = 0.1

# =============================================================================
# Scoring Parameters
# =============================================================================

# Predicted distributions must sum to one within this tolerance
PROBABILITY_TOLERANCE: float = 1e-6

DEFAULT_SCORING_RULE: str = "log_loss"
DEFAULT_CALIBRATION_BINS: int = 10

# =============================================================================
# Replay Parameters
# =============================================================================

DEFAULT_PREFETCH_SIZE: int = 4096
SECONDS_PER_DAY: float = 86_400.0
