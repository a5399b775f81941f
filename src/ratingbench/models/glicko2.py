"""
Glicko-2 Rating System, updated after every game

Based on Professor Mark Glickman's paper:
"Example of the Glicko-2 system" (2013)
http://www.glicko.net/glicko/glicko2.pdf

Two flavours share the implementation:
- per-game: every game is one rating period, φ* = √(φ² + σ'²)
- timed: the rating period is a fixed number of days. Idle time is kept
  as a number of elapsed periods; the prediction grows φ by periods·σ²
  with the current σ, the update solves σ' on the stored φ and then grows
  it with the new volatility, φ* = √(φ² + periods·σ'²). φ is clamped to
  [60, 350] on the Glicko scale and σ is capped at 0.1
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import datetime

from scipy.optimize import brentq

from ratingbench.core.config import Glicko2Config
from ratingbench.core.constants import (
    DEFAULT_RATING,
    GLICKO2_CONVERGENCE_TOLERANCE,
    GLICKO2_SCALE,
    MAX_RD,
    TIMED_MAX_VOLATILITY,
    TIMED_MIN_RD,
)
from ratingbench.core.types import Outcome, Prediction
from ratingbench.models.glicko import elapsed_days

MAX_PHI = MAX_RD / GLICKO2_SCALE
TIMED_MIN_PHI = TIMED_MIN_RD / GLICKO2_SCALE


@dataclass(frozen=True)
class Glicko2State:
    """
    Glicko-2 rating on the internal scale.

    Attributes:
        mu: Skill estimate, (rating - 1500) / 173.7178
        phi: Rating deviation, rd / 173.7178
        sigma: Volatility, degree of expected fluctuation in rating
        last_played: Time of the player's latest game, None if unknown
        games: Number of games the rating is based on
        idle_periods: Rating periods since ``last_played``, set by ``age``
            in the timed flavour and zero in stored states
    """

    mu: float
    phi: float
    sigma: float
    last_played: datetime | None = None
    games: int = 0
    idle_periods: float = 0.0

    @property
    def rating(self) -> float:
        return DEFAULT_RATING + self.mu * GLICKO2_SCALE

    @property
    def rd(self) -> float:
        return self.phi * GLICKO2_SCALE


def g(phi: float) -> float:
    """
    The g function from Glicko-2.

    g(φ) = 1 / √(1 + 3φ²/π²)
    """
    return 1.0 / math.sqrt(1.0 + 3.0 * phi * phi / (math.pi * math.pi))


def expected_score(mu: float, mu_j: float, phi_j: float) -> float:
    """
    Calculate expected score against an opponent.

    E(μ, μⱼ, φⱼ) = 1 / (1 + exp(-g(φⱼ)(μ - μⱼ)))
    """
    return 1.0 / (1.0 + math.exp(-g(phi_j) * (mu - mu_j)))


def solve_volatility(
    phi: float,
    sigma: float,
    v: float,
    delta: float,
    tau: float,
    tolerance: float = GLICKO2_CONVERGENCE_TOLERANCE,
) -> float:
    """
    New volatility σ' (Step 5 of the Glicko-2 algorithm).

    Finds the root of

        f(x) = eˣ(Δ² - φ² - v - eˣ) / 2(φ² + v + eˣ)² - (x - a)/τ²

    with a = ln σ², bracketed as in the paper and solved with Brent's
    method.
    """
    a = math.log(sigma * sigma)
    phi_squared = phi * phi
    delta_squared = delta * delta

    def f(x: float) -> float:
        ex = math.exp(x)
        numerator = ex * (delta_squared - phi_squared - v - ex)
        denominator = 2.0 * (phi_squared + v + ex) ** 2
        return numerator / denominator - (x - a) / (tau * tau)

    if delta_squared > phi_squared + v:
        b = math.log(delta_squared - phi_squared - v)
    else:
        k = 1
        while f(a - k * tau) < 0:
            k += 1
        b = a - k * tau

    lower, upper = min(a, b), max(a, b)
    f_lower, f_upper = f(lower), f(upper)
    if lower == upper or f_lower == 0.0:
        root = lower
    elif f_upper == 0.0:
        root = upper
    elif f_lower * f_upper > 0:
        # Rounding can leave both ends on the same side of a root at an end
        root = lower if abs(f_lower) < abs(f_upper) else upper
    else:
        root = brentq(f, lower, upper, xtol=tolerance)

    return math.exp(root / 2.0)


class Glicko2Model:
    """Glicko-2 with one game per update."""

    def __init__(self, config: Glicko2Config | None = None) -> None:
        self.config = config or Glicko2Config()
        period = self.config.rating_period_days
        if period is not None and period <= 0:
            raise ValueError(
                f"rating_period_days must be positive, got {period}"
            )
        self.name = "glicko2" if period is None else "glicko2-timed"

    @property
    def timed(self) -> bool:
        return self.config.rating_period_days is not None

    def default_state(self) -> Glicko2State:
        return Glicko2State(
            mu=(self.config.initial_rating - DEFAULT_RATING) / GLICKO2_SCALE,
            phi=self.config.initial_rd / GLICKO2_SCALE,
            sigma=self.config.initial_volatility,
        )

    def age(self, state: Glicko2State, at: datetime | None) -> Glicko2State:
        if not self.timed:
            return state
        days = elapsed_days(state.last_played, at)
        return replace(
            state, idle_periods=days / self.config.rating_period_days
        )

    def _periods(self, state: Glicko2State) -> float:
        return state.idle_periods if self.timed else 1.0

    def pre_game_phi(self, state: Glicko2State) -> float:
        """φ grown over the idle periods with the current volatility."""
        phi = math.sqrt(state.phi**2 + self._periods(state) * state.sigma**2)
        return min(phi, MAX_PHI) if self.timed else phi

    def predict(self, white: Glicko2State, black: Glicko2State) -> Prediction:
        combined_phi = math.hypot(
            self.pre_game_phi(white), self.pre_game_phi(black)
        )
        return Prediction.from_expected_score(
            expected_score(white.mu, black.mu, combined_phi)
        )

    def update(
        self,
        white: Glicko2State,
        black: Glicko2State,
        outcome: Outcome,
        at: datetime | None = None,
    ) -> tuple[Glicko2State, Glicko2State]:
        new_white = self._rate(white, black, outcome.score, at)
        new_black = self._rate(black, white, 1.0 - outcome.score, at)
        return new_white, new_black

    def _rate(
        self,
        player: Glicko2State,
        opponent: Glicko2State,
        score: float,
        at: datetime | None,
    ) -> Glicko2State:
        e = expected_score(player.mu, opponent.mu, opponent.phi)
        g_j = g(opponent.phi)

        v = 1.0 / (g_j * g_j * e * (1.0 - e))
        delta = v * g_j * (score - e)

        sigma = solve_volatility(
            player.phi, player.sigma, v, delta, self.config.tau
        )

        phi_star = math.sqrt(player.phi**2 + self._periods(player) * sigma**2)

        phi = 1.0 / math.sqrt(1.0 / phi_star**2 + 1.0 / v)
        mu = player.mu + phi * phi * g_j * (score - e)

        if self.timed:
            phi = max(phi, TIMED_MIN_PHI)
            sigma = min(sigma, TIMED_MAX_VOLATILITY)

        return Glicko2State(
            mu=mu,
            phi=phi,
            sigma=sigma,
            last_played=at if at is not None else player.last_played,
            games=player.games + 1,
        )

    def describe(self, state: Glicko2State) -> dict[str, float]:
        return {
            "rating": state.rating,
            "rd": state.rd,
            "volatility": state.sigma,
            "games": state.games,
        }
