"""Sequential replay of game records through one rating model."""

from __future__ import annotations

from collections import Counter
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterable, Mapping

from ratingbench.core.config import ReplayConfig
from ratingbench.core.exceptions import EngineStateError, MalformedRecordError
from ratingbench.core.logging import get_logger, log_timing
from ratingbench.core.types import GameRecord, Outcome, PlayerId, Prediction
from ratingbench.evaluation.accumulator import (
    AccuracyAccumulator,
    AccuracySummary,
)
from ratingbench.replay.results import RunResult, SegmentSummary
from ratingbench.store import RatingStore

if TYPE_CHECKING:
    from ratingbench.core.protocols import RatingModel

logger = get_logger(__name__)


class EngineState(Enum):
    """Replay engine lifecycle states."""

    IDLE = "idle"  # Created, no segment started yet
    SEGMENT_ACTIVE = "segment_active"  # Accepting records
    PREDICTING = "predicting"  # Resolving states and predicting a record
    UPDATING = "updating"  # Computing and storing post-game states
    SCORING = "scoring"  # Recording the prediction and reference baseline
    SEGMENT_CLOSED = "segment_closed"  # Summary of last segment available
    TERMINAL = "terminal"  # Corpus exhausted or aborted


def validate_record(record: GameRecord) -> Outcome:
    """
    Check that a record can be replayed.

    Returns:
        The record's result as an Outcome.

    Raises:
        MalformedRecordError: On a missing player, self-play or an
            unrecognized result.
    """
    for player in (record.white, record.black):
        if player is None or player == "":
            raise MalformedRecordError(
                "missing_player", f"Record without player identity: {record}"
            )
    if record.white == record.black:
        raise MalformedRecordError(
            "self_play", f"{record.white!r} plays against themselves"
        )
    return Outcome.coerce(record.result)


class ReplayEngine:
    """
    Replays records through a rating model and scores its predictions.

    The store lives for the whole run; the segment accumulator is reset at
    every segment start; a second, never-reset accumulator gives the
    cumulative scores. Records are processed strictly one at a time since
    every prediction depends on all earlier games of the same players.
    """

    def __init__(
        self,
        model: RatingModel,
        store: RatingStore,
        accumulator: AccuracyAccumulator,
    ):
        """
        Initialize the engine.

        Args:
            model: Rating model to evaluate
            store: Rating states, owned for the whole run
            accumulator: Per-segment scores, reset at every segment start
        """
        self.model = model
        self.store = store
        self.accumulator = accumulator
        self.cumulative = AccuracyAccumulator(accumulator.config)

        self.state = EngineState.IDLE
        self.segments: list[SegmentSummary] = []
        self.segment_name: str | None = None
        self.records = 0
        self.skip_reasons: Counter[str] = Counter()

    @classmethod
    def from_config(
        cls, model: RatingModel, config: ReplayConfig
    ) -> ReplayEngine:
        """Build an engine with a fresh store and accumulator."""
        return cls(
            model,
            RatingStore(model.default_state, max_players=config.max_players),
            AccuracyAccumulator(config.scoring),
        )

    @property
    def name(self) -> str:
        return self.model.name

    @property
    def skipped(self) -> int:
        return sum(self.skip_reasons.values())

    @property
    def games(self) -> int:
        """Games scored over the whole run."""
        return self.cumulative.count

    def _require(self, action: str, *allowed: EngineState) -> None:
        if self.state not in allowed:
            raise EngineStateError(
                f"Cannot {action} while engine is {self.state.value}"
            )

    # ------------------------------------------------------------------
    # Segment hooks
    # ------------------------------------------------------------------

    def start_segment(self, name: str) -> None:
        """Begin a segment: reset segment scores, keep every rating."""
        self._require(
            "start a segment", EngineState.IDLE, EngineState.SEGMENT_CLOSED
        )
        self.accumulator.reset()
        self.segment_name = name
        self.records = 0
        self.skip_reasons = Counter()
        self.state = EngineState.SEGMENT_ACTIVE
        logger.debug(f"[{self.name}] segment {name} started")

    def process(self, record: GameRecord) -> Prediction | None:
        """
        Replay one record.

        Returns:
            The pre-game prediction, or None if the record was skipped as
            malformed.

        Raises:
            ModelContractError: If the model's prediction is invalid.
            CapacityExceededError: If a new player exceeds the budget.
        """
        self._require("process a record", EngineState.SEGMENT_ACTIVE)

        try:
            outcome = validate_record(record)
        except MalformedRecordError as error:
            self.skip_reasons[error.reason] += 1
            logger.warning(
                f"[{self.name}] skipping record in {self.segment_name}: {error}"
            )
            return None

        self.store.ensure_capacity(record.white, record.black)

        at = record.played_at
        try:
            self.state = EngineState.PREDICTING
            white = self.model.age(self.store.get_or_create(record.white), at)
            black = self.model.age(self.store.get_or_create(record.black), at)
            prediction = self.model.predict(white, black)
            # Fail before any state is written
            self.accumulator.check(prediction, outcome)

            self.state = EngineState.UPDATING
            new_white, new_black = self.model.update(white, black, outcome, at)
        except BaseException:
            # No rating was updated; the segment stays usable
            self.state = EngineState.SEGMENT_ACTIVE
            raise

        self.store.set_pair(record.white, new_white, record.black, new_black)
        self.state = EngineState.SCORING
        self._score(record, prediction, outcome)
        self.state = EngineState.SEGMENT_ACTIVE
        return prediction

    def _score(
        self, record: GameRecord, prediction: Prediction, outcome: Outcome
    ) -> None:
        self.records += 1
        for accumulator in (self.accumulator, self.cumulative):
            accumulator.record(prediction, outcome)
            if record.white_elo is not None and record.black_elo is not None:
                accumulator.record_reference(
                    record.white_elo, record.black_elo, outcome
                )

    def end_segment(self) -> SegmentSummary:
        """Close the current segment and return its summary."""
        self._require("end a segment", EngineState.SEGMENT_ACTIVE)
        summary = self.segment_summary()
        self.segments.append(summary)
        self.state = EngineState.SEGMENT_CLOSED
        logger.info(f"[{self.name}] {format_summary(summary)}")
        return summary

    def abort(self) -> SegmentSummary | None:
        """
        Stop the run early.

        Returns:
            The open segment's summary marked partial, or None if no segment
            was open.
        """
        self._require(
            "abort",
            *(s for s in EngineState if s is not EngineState.TERMINAL),
        )
        summary = None
        if self.state not in (EngineState.IDLE, EngineState.SEGMENT_CLOSED):
            summary = self.segment_summary(partial=True)
            self.segments.append(summary)
            logger.warning(
                f"[{self.name}] aborted: {format_summary(summary)}"
            )
        self.state = EngineState.TERMINAL
        return summary

    def finish(self) -> RunResult:
        """Mark the corpus exhausted and return the run results."""
        self._require(
            "finish", EngineState.IDLE, EngineState.SEGMENT_CLOSED
        )
        self.state = EngineState.TERMINAL
        return self.result()

    # ------------------------------------------------------------------
    # Drivers
    # ------------------------------------------------------------------

    def replay_segment(
        self, name: str, records: Iterable[GameRecord]
    ) -> SegmentSummary:
        """Start a segment, replay every record, end it."""
        self.start_segment(name)
        for record in records:
            self.process(record)
        return self.end_segment()

    def run(
        self, segments: Iterable[tuple[str, Iterable[GameRecord]]]
    ) -> RunResult:
        """
        Replay ``(name, records)`` segments until the corpus is exhausted.

        A KeyboardInterrupt stops consumption; the open segment is reported
        as partial and the result is flagged ``aborted``.
        """
        try:
            for name, records in segments:
                with log_timing(
                    logger,
                    f"replaying {name} with {self.name}",
                    lambda: self.games,
                ):
                    self.replay_segment(name, records)
        except KeyboardInterrupt:
            logger.warning(f"[{self.name}] interrupted by user")
            self.abort()
            return self.result(aborted=True)
        return self.finish()

    # ------------------------------------------------------------------
    # Read-outs
    # ------------------------------------------------------------------

    def snapshot(self) -> Mapping[PlayerId, Any]:
        return self.store.snapshot()

    def segment_summary(self, partial: bool = False) -> SegmentSummary:
        """Summary of the current (or last closed) segment."""
        return SegmentSummary(
            name=self.segment_name or "",
            accuracy=self.accumulator.summary(),
            records=self.records,
            skipped=self.skipped,
            skip_reasons=dict(self.skip_reasons),
            players=len(self.store),
            partial=partial,
        )

    def cumulative_summary(self) -> AccuracySummary:
        return self.cumulative.summary()

    def result(self, aborted: bool = False) -> RunResult:
        return RunResult(
            model=self.name,
            segments=list(self.segments),
            cumulative=self.cumulative_summary(),
            snapshot=self.snapshot(),
            aborted=aborted,
        )


def format_summary(summary: SegmentSummary) -> str:
    """One-line human readable segment summary."""
    accuracy = summary.accuracy
    line = (
        f"{summary.name}: {accuracy.count:,} games, "
        f"{summary.players:,} players, "
        f"{accuracy.log_loss:.4f} log loss, {accuracy.brier:.4f} Brier, "
        f"{100.0 * accuracy.hit_rate:.3f}% hit rate, "
        f"{accuracy.calibration_error:.4f} ECE"
    )
    if accuracy.reference_count:
        line += (
            f", {100.0 * accuracy.reference_hit_rate:.3f}% reference hit rate"
        )
    if summary.skipped:
        line += f", {summary.skipped:,} skipped"
    if summary.partial:
        line += " (partial)"
    return line
