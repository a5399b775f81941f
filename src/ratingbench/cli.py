#!/usr/bin/env python
"""
Command-line interface for replaying a game corpus through rating models.

Usage:
    ratingbench "data/lichess_db_standard_rated_*.pgn" [options]
    python -m ratingbench.cli PATTERN [options]

Examples:
    # Elo with the default K=32 on rated blitz games
    ratingbench "data/*.pgn"

    # Compare three models side by side and dump final ratings
    ratingbench "data/*.pgn" --model elo --model glicko --model glicko2-timed --report out/

    # Score with the Brier rule, rapid and classical games only
    ratingbench "data/*.pgn" --scoring-rule brier --time-control rapid --time-control classical
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterator, Sequence

from tqdm import tqdm

from ratingbench.core.config import (
    DavidsonConfig,
    EloConfig,
    Glicko2Config,
    GlickoConfig,
    IngestConfig,
    ReplayConfig,
    ScoringConfig,
)
from ratingbench.core.constants import (
    DEFAULT_CALIBRATION_BINS,
    DEFAULT_DRAW_NU,
    DEFAULT_K_FACTOR,
    DEFAULT_PREFETCH_SIZE,
    DEFAULT_RATING,
    DEFAULT_TAU,
)
from ratingbench.core.exceptions import RatingBenchError
from ratingbench.core.logging import setup_logging
from ratingbench.core.types import GameRecord
from ratingbench.evaluation.loss import SCORING_RULES
from ratingbench.ingest.corpus import discover_segments, iter_corpus
from ratingbench.ingest.pgn import TimeControl
from ratingbench.models import MODEL_NAMES
from ratingbench.replay.compare import ModelComparison
from ratingbench.replay.engine import format_summary
from ratingbench.report import (
    calibrations_frame,
    summaries_frame,
    write_ratings_csv,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ratingbench",
        description="Replay a game corpus and score rating model predictions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "pattern",
        help="Glob of corpus files; each file is one segment, replayed in name order",
    )

    # Models
    parser.add_argument(
        "--model",
        action="append",
        choices=MODEL_NAMES,
        help="Rating model to evaluate, repeatable (default: elo)",
    )
    parser.add_argument(
        "--k-factor",
        type=float,
        default=DEFAULT_K_FACTOR,
        help=f"Elo K-factor (default: {DEFAULT_K_FACTOR:g})",
    )
    parser.add_argument(
        "--initial-rating",
        type=float,
        default=DEFAULT_RATING,
        help=f"Rating of unseen players (default: {DEFAULT_RATING:g})",
    )
    parser.add_argument(
        "--draw-nu",
        type=float,
        default=DEFAULT_DRAW_NU,
        help=f"Davidson draw parameter (default: {DEFAULT_DRAW_NU:g})",
    )
    parser.add_argument(
        "--tau",
        type=float,
        default=DEFAULT_TAU,
        help=f"Glicko-2 volatility constraint (default: {DEFAULT_TAU:g})",
    )

    # Eligibility
    parser.add_argument(
        "--time-control",
        action="append",
        choices=[tc.value for tc in TimeControl if tc is not TimeControl.UNUSABLE],
        help="Time control to replay, repeatable (default: blitz)",
    )
    parser.add_argument(
        "--include-unrated",
        action="store_true",
        help="Also replay unrated games",
    )

    # Scoring
    parser.add_argument(
        "--scoring-rule",
        choices=list(SCORING_RULES),
        default="log_loss",
        help="Rule reported as mean loss (default: log_loss)",
    )
    parser.add_argument(
        "--calibration-bins",
        type=int,
        default=DEFAULT_CALIBRATION_BINS,
        help=f"Calibration histogram bins (default: {DEFAULT_CALIBRATION_BINS})",
    )

    # Resources
    parser.add_argument(
        "--max-players",
        type=int,
        help="Abort when a store would exceed this many players (default: unbounded)",
    )
    parser.add_argument(
        "--prefetch",
        type=int,
        default=DEFAULT_PREFETCH_SIZE,
        help=f"Records decoded ahead in a background thread, 0 disables (default: {DEFAULT_PREFETCH_SIZE})",
    )

    # Output
    parser.add_argument(
        "--report",
        type=Path,
        help="Directory for <model>.csv rating dumps, summaries.csv and "
        "calibration.csv",
    )
    parser.add_argument(
        "--no-progress", action="store_true", help="Disable progress bars"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Enable verbose logging"
    )
    parser.add_argument("--log-file", help="Also write logs to this file")
    return parser


def config_from_args(args: argparse.Namespace) -> ReplayConfig:
    """Create a replay configuration from parsed arguments."""
    return ReplayConfig(
        models=tuple(args.model or ("elo",)),
        elo=EloConfig(
            initial_rating=args.initial_rating, k_factor=args.k_factor
        ),
        davidson=DavidsonConfig(
            initial_rating=args.initial_rating,
            k_factor=args.k_factor,
            draw_nu=args.draw_nu,
        ),
        glicko=GlickoConfig(initial_rating=args.initial_rating),
        glicko2=Glicko2Config(initial_rating=args.initial_rating, tau=args.tau),
        scoring=ScoringConfig(
            rule=args.scoring_rule, calibration_bins=args.calibration_bins
        ),
        ingest=IngestConfig(
            time_controls=tuple(args.time_control or ("blitz",)),
            rated_only=not args.include_unrated,
        ),
        max_players=args.max_players,
        prefetch_size=args.prefetch,
    )


def _with_progress(
    segments: Iterator[tuple[str, Iterator[GameRecord]]], disable: bool
) -> Iterator[tuple[str, Iterator[GameRecord]]]:
    for name, records in segments:
        yield name, tqdm(records, desc=name, unit=" games", disable=disable)


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the replay CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(
        logging.DEBUG if args.verbose else logging.INFO,
        log_file=args.log_file,
        progress=not args.no_progress,
    )

    config = config_from_args(args)
    paths = discover_segments(args.pattern)
    if not paths:
        logger.error(f"No corpus files match {args.pattern}")
        return 1

    comparison = ModelComparison.from_config(config)
    segments = _with_progress(
        iter_corpus(paths, config.ingest, config.prefetch_size),
        disable=args.no_progress,
    )

    try:
        results = comparison.run(segments)
    except RatingBenchError as error:
        # Fatal: the snapshots are still available for diagnostics
        logger.error(f"Replay failed: {error}")
        if args.report:
            for name, engine in comparison.engines.items():
                write_ratings_csv(
                    engine.snapshot(), engine.model, args.report / f"{name}.csv"
                )
        return 2

    for name, result in results.items():
        print(f"\n=== {name} ===")
        for summary in result.segments:
            print(format_summary(summary))
        cumulative = result.cumulative
        print(
            f"all segments: {cumulative.count:,} games, "
            f"{cumulative.mean_loss:.4f} mean {cumulative.scoring_rule}, "
            f"{cumulative.calibration_error:.4f} ECE"
        )
        if result.aborted:
            print("Replay stopped by user; last segment is partial")

    if args.report:
        for name, result in results.items():
            path = write_ratings_csv(
                result.snapshot,
                comparison.engines[name].model,
                args.report / f"{name}.csv",
            )
            logger.info(f"Wrote {len(result.snapshot):,} ratings to {path}")
        summaries_frame(
            {name: result.segments for name, result in results.items()}
        ).write_csv(args.report / "summaries.csv")
        # Cumulative over every replayed segment
        calibrations_frame(
            {
                name: engine.cumulative.calibration_frame()
                for name, engine in comparison.engines.items()
            }
        ).write_csv(args.report / "calibration.csv")

    return 130 if any(r.aborted for r in results.values()) else 0


if __name__ == "__main__":
    sys.exit(main())
