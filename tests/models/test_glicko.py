"""Tests for per-game Glicko-1."""

from datetime import datetime, timedelta, timezone

import pytest

from ratingbench.core.constants import MAX_RD, MIN_RD
from ratingbench.core.types import Outcome
from ratingbench.models.glicko import (
    GlickoModel,
    GlickoState,
    elapsed_days,
    expected_score,
    g,
    inflate_rd,
)

T0 = datetime(2013, 1, 1, tzinfo=timezone.utc)


class TestGlickoFormulas:
    """Check against the worked example in Glickman's paper."""

    @pytest.mark.parametrize(
        "rd,expected", [(30, 0.9955), (100, 0.9531), (300, 0.7242)]
    )
    def test_g(self, rd, expected):
        assert g(rd) == pytest.approx(expected, abs=1e-4)

    @pytest.mark.parametrize(
        "opponent,rd,expected",
        [(1400, 30, 0.639), (1550, 100, 0.432), (1700, 300, 0.303)],
    )
    def test_expected_score(self, opponent, rd, expected):
        assert expected_score(1500, opponent, rd) == pytest.approx(
            expected, abs=1e-3
        )

    def test_g_of_zero_is_one(self):
        assert g(0) == 1.0

    def test_inflate_rd_caps_at_unrated(self):
        assert inflate_rd(50, 0) == 50
        assert inflate_rd(50, 5 * 365) == pytest.approx(MAX_RD)
        assert inflate_rd(50, 100 * 365) == MAX_RD
        assert 50 < inflate_rd(50, 30) < MAX_RD

    def test_elapsed_days(self):
        assert elapsed_days(None, T0) == 0.0
        assert elapsed_days(T0, None) == 0.0
        assert elapsed_days(T0, T0 + timedelta(hours=36)) == pytest.approx(1.5)
        assert elapsed_days(T0 + timedelta(days=1), T0) == 0.0


class TestGlickoModel:
    """Test the model interface."""

    def setup_method(self):
        self.model = GlickoModel()

    def test_new_players_are_even(self):
        a = self.model.default_state()
        assert a == GlickoState(rating=1500, rd=350)
        prediction = self.model.predict(a, self.model.default_state())
        assert prediction.white == pytest.approx(0.5)
        assert prediction.two_outcome

    def test_win_between_equals_is_symmetric(self):
        a = self.model.default_state()
        b = self.model.default_state()
        new_a, new_b = self.model.update(a, b, Outcome.WHITE_WIN, T0)

        assert new_a.rating > 1500
        assert new_a.rating - 1500 == pytest.approx(1500 - new_b.rating)
        assert new_a.rd == pytest.approx(new_b.rd)
        assert new_a.rd < 350
        assert new_a.last_played == T0
        assert new_a.games == 1

    def test_prediction_shrinks_toward_even_with_uncertainty(self):
        sure = self.model.predict(
            GlickoState(rating=1700, rd=50), GlickoState(rating=1500, rd=50)
        )
        unsure = self.model.predict(
            GlickoState(rating=1700, rd=300), GlickoState(rating=1500, rd=300)
        )
        assert 0.5 < unsure.white < sure.white

    def test_age_inflates_rd_with_time(self):
        state = GlickoState(rating=1600, rd=60, last_played=T0, games=20)
        assert self.model.age(state, T0) is state
        assert self.model.age(state, None) is state

        aged = self.model.age(state, T0 + timedelta(days=90))
        assert aged.rd > 60
        assert aged.rating == 1600
        assert aged.last_played == T0

    def test_rd_never_drops_below_floor(self):
        a = GlickoState(rating=1500, rd=MIN_RD)
        b = GlickoState(rating=1500, rd=MIN_RD)
        for _ in range(50):
            a, b = self.model.update(a, b, Outcome.DRAW, T0)
        assert a.rd >= MIN_RD
        assert b.rd >= MIN_RD

    def test_missing_time_keeps_last_played(self):
        a = GlickoState(rating=1500, rd=200, last_played=T0)
        new_a, _ = self.model.update(
            a, self.model.default_state(), Outcome.DRAW, None
        )
        assert new_a.last_played == T0

    def test_describe(self):
        state = GlickoState(rating=1550, rd=80, games=3)
        described = self.model.describe(state)
        assert described == {"rating": 1550, "rd": 80, "games": 3}
