"""Tabular exports of rating snapshots and segment summaries."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable, Mapping

import polars as pl

if TYPE_CHECKING:
    from ratingbench.core.protocols import RatingModel
    from ratingbench.core.types import PlayerId
    from ratingbench.replay.results import SegmentSummary


def snapshot_frame(
    snapshot: Mapping[PlayerId, Any], model: RatingModel
) -> pl.DataFrame:
    """
    Convert a rating snapshot to a Polars DataFrame.

    Rows are sorted by the lower confidence bound ``rating - 2 * rd`` when
    the model reports an RD, by rating otherwise, best first.

    Args:
        snapshot: Player id to rating state, as returned by the engine.
        model: The model that produced the states.

    Returns:
        DataFrame with a ``player`` column followed by the model's
        ``describe`` columns.
    """
    rows = [
        {"player": str(player), **model.describe(state)}
        for player, state in snapshot.items()
    ]
    if not rows:
        return pl.DataFrame({"player": [], "rating": []})

    dataframe = pl.DataFrame(rows)
    if "rd" in dataframe.columns:
        dataframe = dataframe.with_columns(
            (pl.col("rating") - 2.0 * pl.col("rd")).alias("lower_bound")
        )
        sort_column = "lower_bound"
    else:
        sort_column = "rating"
    return dataframe.sort(sort_column, descending=True)


def write_ratings_csv(
    snapshot: Mapping[PlayerId, Any], model: RatingModel, path: str | Path
) -> Path:
    """Dump a snapshot as CSV, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    snapshot_frame(snapshot, model).write_csv(path)
    return path


def summaries_frame(
    summaries: Mapping[str, Iterable[SegmentSummary]],
) -> pl.DataFrame:
    """One row per (model, segment) with every reported number."""
    rows = [
        {"model": model, **summary.to_dict()}
        for model, model_summaries in summaries.items()
        for summary in model_summaries
    ]
    return pl.DataFrame(rows)


def calibrations_frame(frames: Mapping[str, pl.DataFrame]) -> pl.DataFrame:
    """
    Stack per-model calibration tables.

    Args:
        frames: Model name to the output of ``calibration_frame``.

    Returns:
        One row per (model, non-empty bin), with a leading ``model`` column.
    """
    stacked = [
        frame.select(pl.lit(model).alias("model"), pl.all())
        for model, frame in frames.items()
        if frame.height
    ]
    if not stacked:
        return pl.DataFrame({"model": [], "bucket_range": [], "count": []})
    return pl.concat(stacked)
