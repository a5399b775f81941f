"""
Glicko-1 Rating System, updated after every game

Based on Professor Mark Glickman's paper:
"The Glicko system" (1995)
http://www.glicko.net/glicko/glicko.pdf

Each game is treated as its own rating period. Between games the rating
deviation (RD) grows with the wall-clock time since the player's previous
game, so a player returning after a long break is treated as less certain.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import datetime

from ratingbench.core.config import GlickoConfig
from ratingbench.core.constants import (
    ELO_SCALE,
    GLICKO_C_SQUARED,
    GLICKO_Q,
    MAX_RD,
    MIN_RD,
    SECONDS_PER_DAY,
)
from ratingbench.core.types import Outcome, Prediction


@dataclass(frozen=True)
class GlickoState:
    """
    Glicko-1 rating.

    Attributes:
        rating: Skill estimate on the Elo scale
        rd: Rating Deviation, uncertainty in the rating
        last_played: Time of the player's latest game, None if unknown
        games: Number of games the rating is based on
    """

    rating: float
    rd: float
    last_played: datetime | None = None
    games: int = 0


def g(rd: float) -> float:
    """
    The g function from Glicko.
    Reduces the impact of an opponent's rating based on their uncertainty.

    g(RD) = 1 / √(1 + 3q²RD²/π²)
    """
    return 1.0 / math.sqrt(
        1.0 + 3.0 * GLICKO_Q * GLICKO_Q * rd * rd / (math.pi * math.pi)
    )


def expected_score(rating: float, rating_j: float, rd_j: float) -> float:
    """
    Expected score against an opponent.

    E = 1 / (1 + 10^(-g(RDⱼ)(r - rⱼ)/400))
    """
    return 1.0 / (
        1.0 + math.pow(10.0, -g(rd_j) * (rating - rating_j) / ELO_SCALE)
    )


def elapsed_days(since: datetime | None, until: datetime | None) -> float:
    """Days between two timestamps; 0 when either is unknown or out of order."""
    if since is None or until is None:
        return 0.0
    return max(0.0, (until - since).total_seconds() / SECONDS_PER_DAY)


def inflate_rd(rd: float, days: float) -> float:
    """RD after ``days`` of inactivity, capped at the unrated RD."""
    return min(math.sqrt(rd * rd + days * GLICKO_C_SQUARED), MAX_RD)


class GlickoModel:
    """Glicko-1 with per-game updates and time-based RD growth."""

    name = "glicko"

    def __init__(self, config: GlickoConfig | None = None) -> None:
        self.config = config or GlickoConfig()

    def default_state(self) -> GlickoState:
        return GlickoState(
            rating=self.config.initial_rating, rd=self.config.initial_rd
        )

    def age(self, state: GlickoState, at: datetime | None) -> GlickoState:
        days = elapsed_days(state.last_played, at)
        if days == 0.0:
            return state
        return replace(state, rd=inflate_rd(state.rd, days))

    def predict(self, white: GlickoState, black: GlickoState) -> Prediction:
        # Both players' uncertainty widens the outcome distribution
        combined_rd = math.hypot(white.rd, black.rd)
        return Prediction.from_expected_score(
            expected_score(white.rating, black.rating, combined_rd)
        )

    def update(
        self,
        white: GlickoState,
        black: GlickoState,
        outcome: Outcome,
        at: datetime | None = None,
    ) -> tuple[GlickoState, GlickoState]:
        new_white = self._rate(white, black, outcome.score, at)
        new_black = self._rate(black, white, 1.0 - outcome.score, at)
        return new_white, new_black

    def _rate(
        self,
        player: GlickoState,
        opponent: GlickoState,
        score: float,
        at: datetime | None,
    ) -> GlickoState:
        e = expected_score(player.rating, opponent.rating, opponent.rd)
        g_j = g(opponent.rd)

        d_squared = 1.0 / (GLICKO_Q * GLICKO_Q * g_j * g_j * e * (1.0 - e))
        precision = 1.0 / (player.rd * player.rd) + 1.0 / d_squared

        rating = player.rating + (GLICKO_Q / precision) * g_j * (score - e)
        rd = math.sqrt(1.0 / precision)

        return GlickoState(
            rating=rating,
            rd=max(rd, MIN_RD),
            last_played=at if at is not None else player.last_played,
            games=player.games + 1,
        )

    def describe(self, state: GlickoState) -> dict[str, float]:
        return {"rating": state.rating, "rd": state.rd, "games": state.games}
