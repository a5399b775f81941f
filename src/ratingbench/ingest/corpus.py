"""Enumerating corpus files; one file is one replay segment."""

from __future__ import annotations

import bz2
import glob
import gzip
import io
import logging
from pathlib import Path
from typing import Iterable, Iterator, TextIO

import zstandard

from ratingbench.core.config import IngestConfig
from ratingbench.core.types import GameRecord
from ratingbench.ingest.pgn import read_games
from ratingbench.replay.prefetch import prefetch

logger = logging.getLogger(__name__)

# Suffixes stripped from a file name to get its segment name
CORPUS_SUFFIXES = (".zst", ".gz", ".bz2", ".pgn")

# Compressed formats that are recognised but not decoded
UNSUPPORTED_SUFFIXES = frozenset({".xz", ".lzma", ".zip", ".7z", ".lz4", ".br"})


def discover_segments(pattern: str | Path) -> list[Path]:
    """
    Files matching ``pattern``, sorted by name.

    Monthly dump names (``..._2013-01.pgn.zst``) sort chronologically, which
    gives the replay order.
    """
    paths = sorted(Path(p) for p in glob.glob(str(pattern)))
    logger.info(f"Found {len(paths)} corpus files matching {pattern}")
    return paths


def open_text(path: Path) -> TextIO:
    """
    Open a plain, zstd, gzip or bz2 compressed text file.

    Raises:
        ValueError: If the file uses a compression format that cannot be
            decoded, instead of handing binary data to the PGN reader.
    """
    suffix = path.suffix.lower()
    if suffix == ".zst":
        raw = open(path, "rb")
        try:
            reader = zstandard.ZstdDecompressor().stream_reader(
                raw, read_across_frames=True
            )
        except Exception:
            raw.close()
            raise
        return io.TextIOWrapper(reader, encoding="utf-8", errors="replace")
    if suffix == ".gz":
        return gzip.open(path, "rt", encoding="utf-8", errors="replace")
    if suffix == ".bz2":
        return bz2.open(path, "rt", encoding="utf-8", errors="replace")
    if suffix in UNSUPPORTED_SUFFIXES:
        raise ValueError(f"Unsupported compression {suffix!r} for {path}")
    return open(path, "r", encoding="utf-8", errors="replace")


def segment_name(path: Path) -> str:
    """File name without any compression or .pgn suffix."""
    name = path.name
    for suffix in CORPUS_SUFFIXES:
        if name.lower().endswith(suffix):
            name = name[: -len(suffix)]
    return name


def iter_segment(
    path: Path, config: IngestConfig | None = None
) -> Iterator[GameRecord]:
    """Eligible records of one file, read lazily."""
    with open_text(path) as handle:
        yield from read_games(handle, config)


def iter_corpus(
    paths: Iterable[Path],
    config: IngestConfig | None = None,
    prefetch_size: int = 0,
) -> Iterator[tuple[str, Iterator[GameRecord]]]:
    """
    ``(segment name, records)`` pairs for the replay drivers.

    Args:
        paths: Corpus files in replay order
        config: Eligibility policy
        prefetch_size: Records decoded ahead in a background thread
            (0 decodes on the replay thread)
    """
    for path in paths:
        records = iter_segment(path, config)
        yield segment_name(path), prefetch(records, prefetch_size)
