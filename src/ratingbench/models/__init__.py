"""Rating model variants, selected by name at configuration time."""

from __future__ import annotations

from dataclasses import replace
from typing import Callable

from ratingbench.core.config import ReplayConfig
from ratingbench.core.constants import DEFAULT_RATING_PERIOD_DAYS
from ratingbench.core.protocols import RatingModel
from ratingbench.models.davidson import DavidsonEloModel
from ratingbench.models.elo import EloModel, EloState
from ratingbench.models.glicko import GlickoModel, GlickoState
from ratingbench.models.glicko2 import Glicko2Model, Glicko2State


def _timed_glicko2(config: ReplayConfig) -> Glicko2Model:
    glicko2 = config.glicko2
    if glicko2.rating_period_days is None:
        glicko2 = replace(
            glicko2, rating_period_days=DEFAULT_RATING_PERIOD_DAYS
        )
    return Glicko2Model(glicko2)


def _per_game_glicko2(config: ReplayConfig) -> Glicko2Model:
    return Glicko2Model(replace(config.glicko2, rating_period_days=None))


_FACTORIES: dict[str, Callable[[ReplayConfig], RatingModel]] = {
    "elo": lambda config: EloModel(config.elo),
    "elo-davidson": lambda config: DavidsonEloModel(config.davidson),
    "glicko": lambda config: GlickoModel(config.glicko),
    "glicko2": _per_game_glicko2,
    "glicko2-timed": _timed_glicko2,
}

MODEL_NAMES: tuple[str, ...] = tuple(_FACTORIES)


def build_model(name: str, config: ReplayConfig | None = None) -> RatingModel:
    """Instantiate the rating model registered under ``name``.

    Args:
        name: One of MODEL_NAMES.
        config: Replay configuration holding the model parameters.

    Returns:
        A fresh model instance.

    Raises:
        ValueError: If ``name`` is not a registered model.
    """
    try:
        factory = _FACTORIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown rating model {name!r}; choose from {', '.join(MODEL_NAMES)}"
        ) from None
    return factory(config or ReplayConfig())


__all__ = [
    "MODEL_NAMES",
    "build_model",
    "DavidsonEloModel",
    "EloModel",
    "EloState",
    "GlickoModel",
    "GlickoState",
    "Glicko2Model",
    "Glicko2State",
]
