"""Corpus decoding: file enumeration, PGN headers and eligibility."""

from ratingbench.ingest.corpus import (
    discover_segments,
    iter_corpus,
    iter_segment,
    open_text,
    segment_name,
)
from ratingbench.ingest.pgn import (
    TimeControl,
    classify_event,
    is_eligible,
    parse_played_at,
    read_games,
    record_from_headers,
)

__all__ = [
    "TimeControl",
    "classify_event",
    "discover_segments",
    "is_eligible",
    "iter_corpus",
    "iter_segment",
    "open_text",
    "parse_played_at",
    "read_games",
    "record_from_headers",
    "segment_name",
]
