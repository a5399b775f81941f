"""Result dataclasses for replay runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ratingbench.evaluation.accumulator import AccuracySummary

if TYPE_CHECKING:
    from typing import Any, Mapping

    from ratingbench.core.types import PlayerId


@dataclass(frozen=True)
class SegmentSummary:
    """Scores of one corpus segment, taken at its end.

    ``partial`` marks a segment cut short by an abort; its numbers cover only
    the records replayed before the abort.
    """

    name: str
    accuracy: AccuracySummary
    records: int
    skipped: int
    skip_reasons: dict[str, int] = field(default_factory=dict)
    players: int = 0
    partial: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Flat dictionary, one key per reported number."""
        data = {
            "segment": self.name,
            "records": self.records,
            "skipped": self.skipped,
            "players": self.players,
            "partial": self.partial,
        }
        data.update(self.accuracy.to_dict())
        return data


@dataclass
class RunResult:
    """Complete replay results for one model."""

    model: str
    segments: list[SegmentSummary]
    cumulative: AccuracySummary
    snapshot: Mapping[PlayerId, Any]
    aborted: bool = False

    @property
    def last_segment(self) -> SegmentSummary | None:
        return self.segments[-1] if self.segments else None
