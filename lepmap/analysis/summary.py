"""Descriptive summaries of occurrence elevations."""

import logging
from typing import Dict, Any, Sequence, Union

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


def elevation_histogram(
    values: Union[Sequence[float], np.ndarray, pd.Series],
    bin_width: float = 100,
) -> pd.DataFrame:
    """
    Count elevations in fixed-width, half-open bins [start, start + bin_width).

    The first bin starts at the lowest observed value rounded down to a multiple of
    bin_width, and bins run contiguously up to the one holding the highest value.
    Empty bins in between are kept with a count of 0. NaNs are ignored.

    Returns:
        DataFrame with columns bin_start, bin_end and count.
    """
    if bin_width <= 0:
        raise ValueError(f"bin_width must be positive, got {bin_width}")

    values = np.asarray(values, dtype=float)
    values = values[~np.isnan(values)]
    if values.size == 0:
        return pd.DataFrame({"bin_start": [], "bin_end": [], "count": []}).astype(
            {"bin_start": float, "bin_end": float, "count": int}
        )

    # Rounding absorbs float error so values on a bin edge open the upper bin
    first = np.floor(np.round(values.min() / bin_width, 9)) * bin_width
    bin_index = np.floor(np.round((values - first) / bin_width, 9)).astype(int)
    counts = np.bincount(bin_index)

    bin_start = first + np.arange(len(counts)) * bin_width
    return pd.DataFrame(
        {
            "bin_start": bin_start,
            "bin_end": bin_start + bin_width,
            "count": counts.astype(int),
        }
    )


def describe_elevation(values: Union[Sequence[float], np.ndarray, pd.Series]) -> Dict[str, Any]:
    """Count, range, mean and median of the non-missing elevations."""
    values = np.asarray(values, dtype=float)
    values = values[~np.isnan(values)]
    if values.size == 0:
        return {"n": 0, "min": np.nan, "max": np.nan, "mean": np.nan, "median": np.nan}
    return {
        "n": int(values.size),
        "min": float(values.min()),
        "max": float(values.max()),
        "mean": float(values.mean()),
        "median": float(np.median(values)),
    }
