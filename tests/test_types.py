"""Tests for the shared value types."""

import math

import pytest

from ratingbench.core.exceptions import MalformedRecordError, ModelContractError
from ratingbench.core.types import Outcome, Prediction


class TestOutcome:
    """Test result parsing and scores."""

    def test_scores_from_white_point_of_view(self):
        assert Outcome.WHITE_WIN.score == 1.0
        assert Outcome.BLACK_WIN.score == 0.0
        assert Outcome.DRAW.score == 0.5

    @pytest.mark.parametrize(
        "token,expected",
        [
            ("1-0", Outcome.WHITE_WIN),
            ("0-1", Outcome.BLACK_WIN),
            ("1/2-1/2", Outcome.DRAW),
            (" 1-0 ", Outcome.WHITE_WIN),
        ],
    )
    def test_from_result(self, token, expected):
        assert Outcome.from_result(token) is expected

    def test_unfinished_game_is_malformed(self):
        with pytest.raises(MalformedRecordError) as excinfo:
            Outcome.from_result("*")
        assert excinfo.value.reason == "unrecognized_outcome"

    def test_coerce_accepts_members_names_and_tokens(self):
        assert Outcome.coerce(Outcome.DRAW) is Outcome.DRAW
        assert Outcome.coerce("BLACK_WIN") is Outcome.BLACK_WIN
        assert Outcome.coerce("1-0") is Outcome.WHITE_WIN

    def test_coerce_rejects_other_types(self):
        with pytest.raises(MalformedRecordError):
            Outcome.coerce(1)

    def test_malformed_record_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            Outcome.from_result("2-0")


class TestPrediction:
    """Test prediction construction and validation."""

    def test_from_expected_score(self):
        prediction = Prediction.from_expected_score(0.75)
        assert prediction.white == 0.75
        assert prediction.black == 0.25
        assert prediction.draw == 0.0
        assert prediction.two_outcome
        assert prediction.expected_score == 0.75
        prediction.validate()

    def test_expected_score_counts_half_of_draws(self):
        prediction = Prediction(white=0.4, draw=0.4, black=0.2)
        assert prediction.expected_score == pytest.approx(0.6)

    def test_probability_of(self):
        prediction = Prediction(white=0.5, draw=0.3, black=0.2)
        assert prediction.probability_of(Outcome.WHITE_WIN) == 0.5
        assert prediction.probability_of(Outcome.DRAW) == 0.3
        assert prediction.probability_of(Outcome.BLACK_WIN) == 0.2

    @pytest.mark.parametrize(
        "prediction",
        [
            Prediction(white=0.6, draw=0.0, black=0.6),
            Prediction(white=1.2, draw=0.0, black=-0.2),
            Prediction(white=math.nan, draw=0.0, black=0.5),
            Prediction(white=0.5, draw=0.1, black=0.4, two_outcome=True),
        ],
    )
    def test_invalid_distributions_raise(self, prediction):
        with pytest.raises(ModelContractError):
            prediction.validate()

    def test_rounding_within_tolerance_is_accepted(self):
        Prediction(white=0.3, draw=0.3, black=0.4 + 1e-9).validate()
