"""
Data Loading and Preprocessing Module
======================================

Functions for loading, coercing, outlier-capping and grouping the housing
listings before analysis. Every function returns a new DataFrame; inputs are
never modified in place.
"""

import pandas as pd
import numpy as np
from typing import Optional, Sequence

from . import config


class DataValidationError(ValueError):
    """Raised when the input data cannot be analysed at all."""


class MissingColumnError(DataValidationError):
    """Raised when required columns are absent from the input."""

    def __init__(self, columns: list[str]):
        self.columns = list(columns)
        super().__init__(f"Missing required column(s): {', '.join(self.columns)}")


class EmptyDatasetError(DataValidationError):
    """Raised when the input holds no records before any filtering."""


def load_csv(filepath: str = None) -> pd.DataFrame:
    """
    Load CSV file with basic validation.

    Parameters:
        filepath: Path to CSV file. Defaults to config.DEFAULT_DATA_FILE

    Returns:
        DataFrame with loaded data
    """
    if filepath is None:
        filepath = config.DEFAULT_DATA_FILE

    df = pd.read_csv(filepath)
    if df.empty:
        raise EmptyDatasetError(f"No records found in {filepath}")

    print(f"Loaded {len(df):,} records with {len(df.columns)} columns from {filepath}")
    return df


def rename_columns(df: pd.DataFrame, renames: dict = None) -> pd.DataFrame:
    """Return a copy with raw header names mapped to analysis names."""
    if renames is None:
        renames = config.COLUMN_RENAMES
    return df.rename(columns=renames)


def require_columns(df: pd.DataFrame, columns: Sequence[str] = None) -> None:
    """
    Check that every required column is present.

    Raises:
        MissingColumnError: naming each absent column
    """
    if columns is None:
        columns = config.REQUIRED_COLUMNS

    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise MissingColumnError(missing)


def require_records(df: pd.DataFrame) -> None:
    """Raise EmptyDatasetError if the frame has no rows."""
    if df.empty:
        raise EmptyDatasetError("Dataset has no records")


def coerce_numeric(series: pd.Series, strip_pattern: str = None) -> pd.Series:
    """
    Parse currency/number-like text into floats.

    Formatting characters ('$', ',') are stripped before parsing. Values that
    fail to parse, and non-finite values, become NaN. Columns that are already
    numeric are returned unchanged.

    Parameters:
        series: Column to coerce
        strip_pattern: Regex of characters to remove. Defaults to config.NUMERIC_STRIP_CHARS

    Returns:
        New Series with the same index
    """
    if pd.api.types.is_numeric_dtype(series) and not pd.api.types.is_bool_dtype(series):
        return series.copy()

    if strip_pattern is None:
        strip_pattern = config.NUMERIC_STRIP_CHARS

    cleaned = series.astype(str).str.replace(strip_pattern, '', regex=True).str.strip()
    values = pd.to_numeric(cleaned, errors='coerce').astype(float)
    return values.where(np.isfinite(values))


def coerce_numeric_columns(
    df: pd.DataFrame,
    columns: Sequence[str] = None,
    strip_pattern: str = None
) -> pd.DataFrame:
    """
    Coerce several columns to numeric.

    Parameters:
        df: Input DataFrame
        columns: Columns to coerce. Defaults to config.REQUIRED_COLUMNS
        strip_pattern: Regex of formatting characters to remove

    Returns:
        New DataFrame with coerced columns
    """
    if columns is None:
        columns = config.REQUIRED_COLUMNS

    require_columns(df, columns)
    df = df.copy()
    for col in columns:
        before = df[col].isna().sum()
        df[col] = coerce_numeric(df[col], strip_pattern)
        unparsed = int(df[col].isna().sum() - before)
        if unparsed > 0:
            print(f"  {col}: {unparsed:,} values could not be parsed (set to missing)")
    return df


def _check_probability(p: float, name: str) -> None:
    if not 0.0 <= p <= 1.0:
        raise ValueError(f"{name} must be between 0 and 1, got {p}")


def compute_percentile_caps(
    df: pd.DataFrame,
    columns: Sequence[str] = None,
    percentile: float = None
) -> dict[str, float]:
    """
    Compute the outlier cap for each column.

    Uses linear interpolation between order statistics (position p*(n-1)
    in the sorted values); missing values are ignored.

    Parameters:
        df: Input DataFrame
        columns: Columns to cap. Defaults to config.CAPPED_COLUMNS
        percentile: Quantile in [0, 1]. Defaults to config.OUTLIER_PERCENTILE

    Returns:
        Dictionary mapping column name to cap value (NaN if column is all missing)
    """
    if columns is None:
        columns = config.CAPPED_COLUMNS
    if percentile is None:
        percentile = config.OUTLIER_PERCENTILE
    _check_probability(percentile, 'percentile')

    require_columns(df, columns)
    return {
        col: float(df[col].quantile(percentile, interpolation='linear'))
        for col in columns
    }


def cap_outliers(
    df: pd.DataFrame,
    columns: Sequence[str] = None,
    percentile: float = None
) -> tuple[pd.DataFrame, dict[str, float]]:
    """
    Drop records above the percentile cap of any capped column.

    A record is kept only if every capped column is <= its cap. Missing
    values fail the comparison, so those records are dropped as well.

    Parameters:
        df: Input DataFrame (numeric columns)
        columns: Columns to cap. Defaults to config.CAPPED_COLUMNS
        percentile: Quantile in [0, 1]. Defaults to config.OUTLIER_PERCENTILE

    Returns:
        Tuple of (filtered DataFrame, {column: cap})
    """
    if columns is None:
        columns = config.CAPPED_COLUMNS
    if percentile is None:
        percentile = config.OUTLIER_PERCENTILE

    caps = compute_percentile_caps(df, columns, percentile)

    keep = pd.Series(True, index=df.index)
    for col, cap in caps.items():
        keep &= df[col] <= cap

    df_filtered = df[keep].copy()
    print(f"After outlier cap ({percentile:.0%} percentile): {len(df_filtered):,} records "
          f"({len(df) - len(df_filtered):,} removed)")
    for col, cap in caps.items():
        print(f"  {col} cap: {cap:,.2f}")
    return df_filtered, caps


def compute_group_boundaries(
    values: pd.Series,
    probs: Sequence[float] = None
) -> np.ndarray:
    """
    Compute group edges at quantiles [0, *probs, 1].

    Parameters:
        values: Numeric Series (missing values ignored)
        probs: Strictly increasing inner probabilities. Defaults to config.TERTILE_PROBS

    Returns:
        Array of len(probs) + 2 non-decreasing edges
    """
    if probs is None:
        probs = config.TERTILE_PROBS

    probs = list(probs)
    for p in probs:
        _check_probability(p, 'group boundary')
    if any(b <= a for a, b in zip(probs, probs[1:])):
        raise ValueError(f"Group boundaries must be strictly increasing, got {probs}")

    quantiles = pd.Series(values, dtype=float).quantile([0.0, *probs, 1.0], interpolation='linear')
    return quantiles.to_numpy(dtype=float)


def assign_groups(
    values: pd.Series,
    boundaries: Sequence[float],
    labels: Sequence[str] = None
) -> pd.Series:
    """
    Label each value by the interval it falls in.

    The first interval is closed on both ends, [b0, b1]; every later one is
    (b_i, b_i+1]. Equal edges leave the bin between them empty. Missing
    values and values outside [b0, b_last] stay unlabelled.

    Parameters:
        values: Numeric Series
        boundaries: Non-decreasing edges, len(labels) + 1 of them
        labels: Ordered category names. Defaults to config.GROUP_LABELS

    Returns:
        Ordered categorical Series aligned with values
    """
    if labels is None:
        labels = config.GROUP_LABELS

    labels = list(labels)
    boundaries = np.asarray(boundaries, dtype=float)
    if len(boundaries) != len(labels) + 1:
        raise ValueError(
            f"Need {len(labels) + 1} boundaries for {len(labels)} labels, got {len(boundaries)}"
        )

    x = pd.Series(values, dtype=float).to_numpy()
    codes = np.searchsorted(boundaries[1:-1], x, side='left')

    with np.errstate(invalid='ignore'):
        outside = np.isnan(x) | (x < boundaries[0]) | (x > boundaries[-1])
    codes = np.where(outside, -1, codes)

    groups = pd.Categorical.from_codes(codes, categories=labels, ordered=True)
    return pd.Series(groups, index=getattr(values, 'index', None))


def create_sqft_groups(
    df: pd.DataFrame,
    value_col: str = None,
    output_col: str = None,
    probs: Sequence[float] = None,
    labels: Sequence[str] = None
) -> tuple[pd.DataFrame, np.ndarray]:
    """
    Split records into ordered quantile groups (Low / Medium / High).

    Parameters:
        df: Input DataFrame (already outlier-capped)
        value_col: Column to split on. Defaults to config.SQFT_COL
        output_col: Name for the new group column. Defaults to config.GROUP_COL
        probs: Inner quantile cut points. Defaults to config.TERTILE_PROBS
        labels: Ordered group labels. Defaults to config.GROUP_LABELS

    Returns:
        Tuple of (DataFrame with group column, boundary array)
    """
    if value_col is None:
        value_col = config.SQFT_COL
    if output_col is None:
        output_col = config.GROUP_COL

    require_columns(df, [value_col])
    boundaries = compute_group_boundaries(df[value_col], probs)

    df = df.copy()
    df[output_col] = assign_groups(df[value_col], boundaries, labels)

    ungrouped = int(df[output_col].isna().sum())
    print(f"Created {output_col}: edges {', '.join(f'{b:,.2f}' for b in boundaries)}")
    if ungrouped:
        print(f"  {ungrouped:,} records could not be grouped (missing {value_col})")
    return df, boundaries


def group_distribution(
    df: pd.DataFrame,
    group_col: str = None,
    labels: Sequence[str] = None
) -> pd.Series:
    """
    Count records per group, in label order (empty groups included).

    Returns:
        Series indexed by label
    """
    if group_col is None:
        group_col = config.GROUP_COL
    if labels is None:
        labels = config.GROUP_LABELS

    counts = df[group_col].value_counts().reindex(list(labels), fill_value=0)
    counts.index.name = group_col
    return counts.rename('count').astype(int)


def load_and_prepare(
    filepath: str = None,
    percentile: float = None,
    probs: Optional[Sequence[float]] = None,
    labels: Optional[Sequence[str]] = None
) -> tuple[pd.DataFrame, dict[str, float], np.ndarray]:
    """
    Convenience function: load, rename, coerce, cap outliers and group.

    Parameters:
        filepath: Path to CSV file
        percentile: Outlier cap quantile
        probs: Inner group quantiles
        labels: Group labels

    Returns:
        Tuple of (grouped DataFrame, caps dict, group boundaries)
    """
    df = load_csv(filepath)
    df = rename_columns(df)
    require_columns(df)
    require_records(df)
    df = coerce_numeric_columns(df)
    df, caps = cap_outliers(df, percentile=percentile)
    df, boundaries = create_sqft_groups(df, probs=probs, labels=labels)
    return df, caps, boundaries
