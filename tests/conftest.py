"""Shared fixtures for corpus-level tests."""

import bz2
import gzip

import pytest
import zstandard



def pgn_game(event, white, black, result, date, time="12:00:00"):
    return (
        f'[Event "{event}"]\n'
        f'[White "{white}"]\n'
        f'[Black "{black}"]\n'
        f'[Result "{result}"]\n'
        f'[UTCDate "{date}"]\n'
        f'[UTCTime "{time}"]\n'
        "\n"
        f"1. d4 d5 {result}\n"
        "\n"
    )


@pytest.fixture
def pgn_corpus(tmp_path):
    """
    Three monthly files, one plain, one gzip and one bz2 compressed.

    January holds two eligible games, February one eligible game plus an
    unrated one, March one eligible game and a self-play record.
    """
    blitz = "Rated Blitz game"
    january = pgn_game(blitz, "alice", "bob", "1-0", "2013.01.05")
    january += pgn_game(blitz, "bob", "carol", "0-1", "2013.01.20")
    february = pgn_game(blitz, "alice", "carol", "1/2-1/2", "2013.02.02")
    february += pgn_game(
        "Casual Blitz game", "dave", "erin", "1-0", "2013.02.03"
    )
    march = pgn_game(blitz, "carol", "bob", "1-0", "2013.03.01")
    march += pgn_game(blitz, "dave", "dave", "1-0", "2013.03.02")

    with gzip.open(tmp_path / "lichess_2013-01.pgn.gz", "wt") as f:
        f.write(january)
    (tmp_path / "lichess_2013-02.pgn").write_text(february, encoding="utf-8")
    with bz2.open(tmp_path / "lichess_2013-03.pgn.bz2", "wt") as f:
        f.write(march)
    (tmp_path / "notes.txt").write_text("not part of the corpus")
    return tmp_path


@pytest.fixture
def zstd_corpus(tmp_path):
    """One zstd compressed month in the naming of the public dumps."""
    games = pgn_game("Rated Blitz game", "alice", "bob", "1-0", "2013.01.05")
    games += pgn_game("Rated Blitz game", "bob", "carol", "0-1", "2013.01.20")
    path = tmp_path / "lichess_db_standard_rated_2013-01.pgn.zst"
    path.write_bytes(zstandard.ZstdCompressor().compress(games.encode("utf-8")))
    return tmp_path
