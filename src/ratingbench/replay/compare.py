"""Side-by-side replay of several rating models over one record stream."""

from __future__ import annotations

from typing import Iterable, Mapping

from ratingbench.core.config import ReplayConfig
from ratingbench.core.logging import get_logger, log_timing
from ratingbench.core.types import GameRecord, Prediction
from ratingbench.models import build_model
from ratingbench.replay.engine import EngineState, ReplayEngine
from ratingbench.replay.results import RunResult, SegmentSummary

logger = get_logger(__name__)


class ModelComparison:
    """
    Feeds every record to one engine per model.

    Each engine owns its own store and accumulators, so the models never see
    each other's state; the corpus is read once.
    """

    def __init__(self, engines: Mapping[str, ReplayEngine]):
        if not engines:
            raise ValueError("ModelComparison needs at least one engine")
        self.engines = dict(engines)

    @classmethod
    def from_config(cls, config: ReplayConfig) -> ModelComparison:
        """One engine per name in ``config.models``."""
        engines = {}
        for name in config.models:
            if name in engines:
                raise ValueError(f"Model {name!r} listed twice")
            engines[name] = ReplayEngine.from_config(
                build_model(name, config), config
            )
        return cls(engines)

    @property
    def games(self) -> int:
        # Every engine sees the same records
        return next(iter(self.engines.values())).games

    def start_segment(self, name: str) -> None:
        for engine in self.engines.values():
            engine.start_segment(name)

    def process(self, record: GameRecord) -> dict[str, Prediction | None]:
        return {
            name: engine.process(record)
            for name, engine in self.engines.items()
        }

    def end_segment(self) -> dict[str, SegmentSummary]:
        return {
            name: engine.end_segment() for name, engine in self.engines.items()
        }

    def replay_segment(
        self, name: str, records: Iterable[GameRecord]
    ) -> dict[str, SegmentSummary]:
        self.start_segment(name)
        for record in records:
            self.process(record)
        return self.end_segment()

    def run(
        self, segments: Iterable[tuple[str, Iterable[GameRecord]]]
    ) -> dict[str, RunResult]:
        """
        Replay all segments through every engine.

        Returns:
            Run results keyed by model name; on KeyboardInterrupt every
            engine is aborted and its result flagged ``aborted``.
        """
        try:
            for name, records in segments:
                with log_timing(
                    logger, f"replaying {name}", lambda: self.games
                ):
                    self.replay_segment(name, records)
        except KeyboardInterrupt:
            logger.warning("Comparison interrupted by user")
            results = {}
            for name, engine in self.engines.items():
                if engine.state is not EngineState.TERMINAL:
                    engine.abort()
                results[name] = engine.result(aborted=True)
            return results
        return {name: engine.finish() for name, engine in self.engines.items()}
