"""
Table cleanup applied to freshly loaded logs.

Each step takes a DataFrame and returns the cleaned DataFrame so the
steps can be run and tested one at a time.
"""

import logging

import pandas as pd

from .errors import MissingRequiredColumn, TimestampFormat

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def clean_column_name(name: str) -> str:
    """Clean up a raw column name by trimming whitespace."""
    return name.strip()


def strip_column_names(df: pd.DataFrame) -> pd.DataFrame:
    """Trim every column name. Duplicate names are left as they are."""
    df = df.copy()
    df.columns = [clean_column_name(str(name)) for name in df.columns]
    return df


def clean_strings(df: pd.DataFrame) -> pd.DataFrame:
    """Trim whitespace from every present value in text columns."""
    df = df.copy()
    for idx in range(df.shape[1]):
        column = df.iloc[:, idx]
        if isinstance(column.dtype, pd.StringDtype):
            df.isetitem(idx, column.str.strip())
    return df


def remove_empty_rows(df: pd.DataFrame) -> pd.DataFrame:
    """Drop rows where all values in that row are null."""
    mask = df.notna().any(axis=1)
    dropped = int((~mask).sum())
    if dropped:
        logger.debug("Removed %d empty rows", dropped)
    return df.loc[mask].reset_index(drop=True)


def _join_timestamp(date, time, offset):
    if pd.isna(date) or pd.isna(time) or pd.isna(offset):
        return None
    return f"{date:%Y-%m-%d}T{time}{offset}"


def parse_timestamp(
    df: pd.DataFrame,
    date_col: str,
    time_col: str,
    offset_col: str,
    new_timestamp_col: str,
    drop_source_cols: bool = True,
) -> pd.DataFrame:
    """
    Combine local date, local time and UTC offset columns into one UTC timestamp.

    Args:
        df: Table holding the three source columns
        date_col: Date column (datetime values)
        time_col: Local time of day column (HH:MM:SS strings)
        offset_col: UTC offset column (e.g. -0400 or -04:00)
        new_timestamp_col: Name of the appended timestamp column
        drop_source_cols: Remove the three source columns afterwards

    Returns:
        Table with the timestamp column appended

    Raises:
        MissingRequiredColumn: A source column is not in the table
        TimestampFormat: A row's fields do not form a valid timestamp
    """
    for column in (date_col, time_col, offset_col):
        if column not in df.columns:
            raise MissingRequiredColumn(column)

    joined = pd.Series(
        [
            _join_timestamp(date, time, offset)
            for date, time, offset in zip(df[date_col], df[time_col], df[offset_col])
        ],
        index=df.index,
        dtype=object,
    )
    try:
        timestamps = pd.to_datetime(joined, format=TIMESTAMP_FORMAT, utc=True)
    except ValueError as e:
        raise TimestampFormat(f"Could not parse {new_timestamp_col}: {e}") from e

    if drop_source_cols:
        df = df.drop(columns=[date_col, time_col, offset_col])
    else:
        df = df.copy()
    df[new_timestamp_col] = timestamps.dt.as_unit("us")
    return df


def clean_dataframe(df: pd.DataFrame) -> pd.DataFrame:
    """Run name, string and empty-row cleanup in that order."""
    df = strip_column_names(df)
    df = clean_strings(df)
    df = remove_empty_rows(df)
    return df
