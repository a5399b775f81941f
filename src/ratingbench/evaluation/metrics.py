"""
Calibration diagnostics for replay predictions.

These complement the scalar scores of the accumulator by showing where, in
predicted-probability space, a model is over- or under-confident.
"""

import math

import numpy as np
import polars as pl


def calibration_frame(
    counts: np.ndarray, predicted: np.ndarray, observed: np.ndarray
) -> pl.DataFrame:
    """
    Build a calibration table from binned sums.

    Parameters
    ----------
    counts : np.ndarray
        Number of predictions per bin
    predicted : np.ndarray
        Sum of predicted expected scores per bin
    observed : np.ndarray
        Sum of actual scores per bin

    Returns
    -------
    pl.DataFrame
        DataFrame with bucket_range, count, mean_predicted, mean_observed and
        gap (observed minus predicted) for each non-empty bin
    """
    n_buckets = len(counts)
    bins = np.linspace(0.0, 1.0, n_buckets + 1)
    labels = [f"{b:.2f}-{bins[i+1]:.2f}" for i, b in enumerate(bins[:-1])]

    mask = counts > 0
    safe_counts = np.where(mask, counts, 1)
    mean_predicted = predicted / safe_counts
    mean_observed = observed / safe_counts

    df = pl.DataFrame(
        {
            "bucket_range": labels,
            "count": counts.astype(np.int64),
            "mean_predicted": mean_predicted,
            "mean_observed": mean_observed,
        }
    )
    return df.filter(pl.Series(mask)).with_columns(
        (pl.col("mean_observed") - pl.col("mean_predicted")).alias("gap")
    )


def expected_calibration_error(calibration: pl.DataFrame) -> float:
    """
    Count-weighted mean absolute calibration gap.

    Parameters
    ----------
    calibration : pl.DataFrame
        Output of :func:`calibration_frame`

    Returns
    -------
    float
        ECE in score units (0 is perfectly calibrated), NaN if empty
    """
    total = calibration["count"].sum()
    if not total:
        return math.nan
    weighted = (calibration["gap"].abs() * calibration["count"]).sum()
    return float(weighted / total)
