"""
Decoding PGN game headers into game records.

Only the header section of each game is read; movetext is skipped by
``chess.pgn.read_headers``. The ``Event`` header carries both the rated flag
and the time control, e.g. ``Rated Blitz game``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Iterator, Mapping, TextIO

import chess.pgn

from ratingbench.core.config import IngestConfig
from ratingbench.core.exceptions import MalformedRecordError
from ratingbench.core.types import GameRecord, Outcome

logger = logging.getLogger(__name__)


class TimeControl(Enum):
    """Time control category parsed from the Event header."""

    UNUSABLE = "unusable"  # Ultrabullet or unknown
    BULLET = "bullet"
    BLITZ = "blitz"
    RAPID = "rapid"
    CLASSICAL = "classical"
    CORRESPONDENCE = "correspondence"


def classify_event(event: str) -> tuple[bool, TimeControl]:
    """
    Parse an Event header.

    Args:
        event: Event header value, e.g. "Rated Blitz game"

    Returns:
        (rated, time_control)
    """
    event = event.lower()
    rated = "rated" in event and "unrated" not in event

    # Order matters: "ultrabullet" contains "bullet"
    if "blitz" in event:
        speed = TimeControl.BLITZ
    elif "rapid" in event:
        speed = TimeControl.RAPID
    elif "classical" in event or "standard" in event:
        speed = TimeControl.CLASSICAL
    elif "ultrabullet" in event:
        speed = TimeControl.UNUSABLE
    elif "bullet" in event:
        speed = TimeControl.BULLET
    elif "correspondence" in event:
        speed = TimeControl.CORRESPONDENCE
    else:
        speed = TimeControl.UNUSABLE
    return rated, speed


def parse_played_at(date: str | None, time: str | None) -> datetime | None:
    """UTCDate ("2013.01.31") and UTCTime ("23:59:59") as an aware datetime."""
    if not date or not time:
        return None
    try:
        parsed = datetime.strptime(f"{date} {time}", "%Y.%m.%d %H:%M:%S")
    except ValueError:
        return None
    return parsed.replace(tzinfo=timezone.utc)


def _parse_elo(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def is_eligible(event: str, config: IngestConfig) -> bool:
    """Apply the eligibility policy to an Event header."""
    rated, speed = classify_event(event)
    if config.rated_only and not rated:
        return False
    return speed.value in config.time_controls


def record_from_headers(
    headers: Mapping[str, str], sequence_key: object = None
) -> GameRecord:
    """
    Build a game record from PGN headers.

    A result token that is not a finished game (e.g. "*") is kept as the raw
    string; the replay engine counts such records as malformed.
    """
    token = headers.get("Result", "")
    try:
        result: Outcome | str = Outcome.from_result(token)
    except MalformedRecordError:
        result = token

    return GameRecord(
        white=headers.get("White") or None,
        black=headers.get("Black") or None,
        result=result,
        sequence_key=sequence_key,
        played_at=parse_played_at(
            headers.get("UTCDate"), headers.get("UTCTime")
        ),
        event=headers.get("Event"),
        white_elo=_parse_elo(headers.get("WhiteElo")),
        black_elo=_parse_elo(headers.get("BlackElo")),
    )


def read_games(
    handle: TextIO, config: IngestConfig | None = None
) -> Iterator[GameRecord]:
    """
    Lazily read eligible games from a PGN text stream.

    Parameters
    ----------
    handle : TextIO
        Open PGN text stream
    config : IngestConfig, optional
        Eligibility policy (defaults to rated blitz only)

    Yields
    ------
    GameRecord
        Eligible games in file order
    """
    config = config or IngestConfig()
    index = 0
    dropped = 0
    while True:
        headers = chess.pgn.read_headers(handle)
        if headers is None:
            break
        index += 1
        if not is_eligible(headers.get("Event", ""), config):
            dropped += 1
            continue
        yield record_from_headers(headers, sequence_key=index)
    logger.debug(f"Read {index:,} games, {dropped:,} ineligible")
