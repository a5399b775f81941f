"""Tests for the replay command-line interface."""

import logging

import polars as pl
import pytest

from ratingbench.cli import build_parser, config_from_args, main


@pytest.fixture(autouse=True)
def restore_logging():
    """main() reconfigures the package logger; put it back afterwards."""
    logger = logging.getLogger("ratingbench")
    handlers = logger.handlers[:]
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


class TestParser:
    """Test argument parsing into a replay configuration."""

    def test_defaults(self):
        args = build_parser().parse_args(["data/*.pgn"])
        config = config_from_args(args)
        assert config.models == ("elo",)
        assert config.elo.k_factor == 32
        assert config.ingest.time_controls == ("blitz",)
        assert config.ingest.rated_only
        assert config.scoring.rule == "log_loss"
        assert config.max_players is None

    def test_options(self):
        args = build_parser().parse_args(
            [
                "data/*.pgn",
                "--model",
                "glicko",
                "--model",
                "elo-davidson",
                "--k-factor",
                "20",
                "--time-control",
                "rapid",
                "--include-unrated",
                "--scoring-rule",
                "brier",
                "--max-players",
                "1000",
            ]
        )
        config = config_from_args(args)
        assert config.models == ("glicko", "elo-davidson")
        assert config.davidson.k_factor == 20
        assert config.ingest.time_controls == ("rapid",)
        assert not config.ingest.rated_only
        assert config.scoring.rule == "brier"
        assert config.max_players == 1000

    def test_unknown_model_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["data/*.pgn", "--model", "trueskill"])


class TestMain:
    """Test full runs over a small corpus."""

    def test_run_with_report(self, pgn_corpus, capsys):
        out = pgn_corpus / "report"
        code = main(
            [
                str(pgn_corpus / "lichess_*"),
                "--model",
                "elo",
                "--model",
                "glicko2",
                "--report",
                str(out),
                "--no-progress",
                "--prefetch",
                "0",
            ]
        )

        assert code == 0
        printed = capsys.readouterr().out
        assert "=== elo ===" in printed
        assert "=== glicko2 ===" in printed
        assert "lichess_2013-03: 1 games" in printed
        assert "all segments: 4 games" in printed
        assert "ECE" in printed

        ratings = pl.read_csv(out / "elo.csv")
        assert sorted(ratings["player"].to_list()) == ["alice", "bob", "carol"]
        summaries = pl.read_csv(out / "summaries.csv")
        assert summaries.height == 6
        assert "calibration_error" in summaries.columns
        calibration = pl.read_csv(out / "calibration.csv")
        assert set(calibration["model"].to_list()) == {"elo", "glicko2"}
        assert calibration.filter(pl.col("model") == "elo")["count"].sum() == 4

    def test_no_matching_files(self, tmp_path):
        assert main([str(tmp_path / "*.pgn"), "--no-progress"]) == 1

    def test_capacity_failure(self, pgn_corpus):
        code = main(
            [
                str(pgn_corpus / "lichess_*"),
                "--max-players",
                "2",
                "--no-progress",
                "--prefetch",
                "0",
            ]
        )
        assert code == 2
