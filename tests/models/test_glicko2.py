"""Tests for Glicko-2, per game and timed."""

import math
from datetime import datetime, timedelta, timezone

import pytest

from ratingbench.core.config import Glicko2Config, ReplayConfig
from ratingbench.core.constants import GLICKO2_SCALE
from ratingbench.core.protocols import RatingModel
from ratingbench.core.types import Outcome
from ratingbench.models import MODEL_NAMES, build_model
from ratingbench.models.glicko2 import (
    MAX_PHI,
    TIMED_MIN_PHI,
    Glicko2Model,
    Glicko2State,
    expected_score,
    g,
    solve_volatility,
)

T0 = datetime(2013, 1, 1, tzinfo=timezone.utc)


class TestGlicko2Formulas:
    """Check against the worked example in Glickman's Glicko-2 paper."""

    def test_g(self):
        assert g(0.1727) == pytest.approx(0.9955, abs=1e-4)
        assert g(0.5756) == pytest.approx(0.9531, abs=1e-4)

    def test_expected_score(self):
        assert expected_score(0.0, -0.5756, 0.1727) == pytest.approx(
            0.639, abs=1e-3
        )

    def test_solve_volatility(self):
        sigma = solve_volatility(
            phi=1.1513, sigma=0.06, v=1.7785, delta=-0.4834, tau=0.5
        )
        assert sigma == pytest.approx(0.05999, abs=1e-5)

    def test_solve_volatility_large_surprise(self):
        # Delta squared above phi squared plus v takes the other bracket
        sigma = solve_volatility(
            phi=0.3, sigma=0.06, v=0.5, delta=3.0, tau=0.75
        )
        assert sigma > 0.06


class TestGlicko2PerGame:
    """Test the per-game variant."""

    def setup_method(self):
        self.model = Glicko2Model(Glicko2Config())

    def test_name_and_mode(self):
        assert self.model.name == "glicko2"
        assert not self.model.timed

    def test_default_state(self):
        state = self.model.default_state()
        assert state.mu == 0.0
        assert state.rating == pytest.approx(1500)
        assert state.rd == pytest.approx(350)
        assert state.sigma == 0.06

    def test_new_players_are_even(self):
        prediction = self.model.predict(
            self.model.default_state(), self.model.default_state()
        )
        assert prediction.white == pytest.approx(0.5)

    def test_win_between_equals_is_symmetric(self):
        a = self.model.default_state()
        b = self.model.default_state()
        new_a, new_b = self.model.update(a, b, Outcome.WHITE_WIN, T0)
        assert new_a.rating > 1500 > new_b.rating
        assert new_a.mu == pytest.approx(-new_b.mu)
        assert new_a.phi < a.phi
        assert new_a.last_played == T0
        assert new_b.games == 1

    def test_age_is_identity_without_period(self):
        state = self.model.default_state()
        assert self.model.age(state, T0 + timedelta(days=400)) is state

    def test_describe(self):
        described = self.model.describe(self.model.default_state())
        assert set(described) == {"rating", "rd", "volatility", "games"}


class TestGlicko2Timed:
    """Test the wall-clock rating period variant."""

    def setup_method(self):
        self.model = Glicko2Model(Glicko2Config(rating_period_days=4.665))

    def test_name_and_mode(self):
        assert self.model.name == "glicko2-timed"
        assert self.model.timed

    def test_invalid_period(self):
        with pytest.raises(ValueError):
            Glicko2Model(Glicko2Config(rating_period_days=0))

    def test_age_counts_idle_periods(self):
        phi = 100 / GLICKO2_SCALE
        state = Glicko2State(mu=0.0, phi=phi, sigma=0.06, last_played=T0)
        aged = self.model.age(state, T0 + timedelta(days=9.33))
        assert aged.phi == phi
        assert aged.idle_periods == pytest.approx(2.0)

    def test_one_period_adds_one_volatility(self):
        phi = 100 / GLICKO2_SCALE
        state = Glicko2State(mu=0.0, phi=phi, sigma=0.06, last_played=T0)
        aged = self.model.age(state, T0 + timedelta(days=4.665))
        assert self.model.pre_game_phi(aged) == pytest.approx(
            math.sqrt(phi**2 + 0.06**2)
        )

    def test_pre_game_phi_is_capped(self):
        state = Glicko2State(
            mu=0.0, phi=300 / GLICKO2_SCALE, sigma=0.09, last_played=T0
        )
        aged = self.model.age(state, T0 + timedelta(days=10_000))
        assert self.model.pre_game_phi(aged) == pytest.approx(MAX_PHI)

    def test_prediction_uses_grown_phi(self):
        rested = self.model.age(
            Glicko2State(mu=0.5, phi=0.5, sigma=0.06, last_played=T0),
            T0 + timedelta(days=46.65),
        )
        opponent = Glicko2State(mu=0.0, phi=0.5, sigma=0.06)
        combined = math.hypot(math.sqrt(0.25 + 10 * 0.06**2), 0.5)
        prediction = self.model.predict(rested, opponent)
        assert prediction.white == pytest.approx(
            expected_score(0.5, 0.0, combined)
        )

    def test_update_solves_volatility_before_growing_phi(self):
        at = T0 + timedelta(days=9.33)
        player = self.model.age(
            Glicko2State(mu=0.3, phi=0.8, sigma=0.06, last_played=T0), at
        )
        opponent = self.model.age(
            Glicko2State(mu=0.0, phi=0.6, sigma=0.06, last_played=at), at
        )

        new_player, _ = self.model.update(
            player, opponent, Outcome.BLACK_WIN, at
        )

        # e and g from the opponent's stored phi, sigma' from the player's
        # stored phi, then two periods of sigma'
        e = expected_score(0.3, 0.0, 0.6)
        g_j = g(0.6)
        v = 1.0 / (g_j**2 * e * (1.0 - e))
        delta = v * g_j * (0.0 - e)
        sigma = solve_volatility(0.8, 0.06, v, delta, 0.75)
        phi_star = math.sqrt(0.8**2 + 2.0 * sigma**2)
        phi = 1.0 / math.sqrt(1.0 / phi_star**2 + 1.0 / v)

        assert new_player.sigma == pytest.approx(min(sigma, 0.1))
        assert new_player.phi == pytest.approx(max(phi, TIMED_MIN_PHI))
        assert new_player.mu == pytest.approx(0.3 + phi**2 * g_j * (0.0 - e))
        assert new_player.idle_periods == 0.0
        assert new_player.last_played == at

    def test_update_clamps_phi_and_sigma(self):
        a = Glicko2State(mu=0.0, phi=TIMED_MIN_PHI, sigma=0.5)
        b = Glicko2State(mu=0.0, phi=TIMED_MIN_PHI, sigma=0.5)
        for _ in range(20):
            a, b = self.model.update(a, b, Outcome.DRAW, T0)
        assert a.phi >= TIMED_MIN_PHI
        assert a.sigma <= 0.1
        assert b.sigma <= 0.1


class TestModelRegistry:
    """Test building models by name."""

    @pytest.mark.parametrize("name", MODEL_NAMES)
    def test_every_model_satisfies_protocol(self, name):
        model = build_model(name)
        assert isinstance(model, RatingModel)
        assert model.name == name
        state = model.default_state()
        model.predict(state, state).validate()

    def test_timed_gets_default_period(self):
        model = build_model("glicko2-timed", ReplayConfig())
        assert model.config.rating_period_days == pytest.approx(4.665)

    def test_per_game_ignores_period(self):
        config = ReplayConfig(glicko2=Glicko2Config(rating_period_days=7.0))
        assert not build_model("glicko2", config).timed
        timed = build_model("glicko2-timed", config)
        assert timed.config.rating_period_days == 7.0

    def test_unknown_model(self):
        with pytest.raises(ValueError, match="Unknown rating model"):
            build_model("trueskill")
