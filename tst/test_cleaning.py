"""Tests for table cleanup steps."""

import pandas as pd
import pytest

from eis2fdr.cleaning import (
    clean_dataframe,
    clean_strings,
    parse_timestamp,
    remove_empty_rows,
    strip_column_names,
)
from eis2fdr.errors import MissingRequiredColumn, TimestampFormat


@pytest.fixture
def time_parts() -> pd.DataFrame:
    return pd.DataFrame({
        "Lcl Date": pd.to_datetime(["2023-11-04", "2023-11-04", None]),
        "Lcl Time": pd.array(["08:48:13", "23:30:00", "08:48:15"], dtype="string"),
        "UTCOfst": pd.array(["-0400", "-04:00", "-0400"], dtype="string"),
        "AltB": [165.0, 166.0, 167.0],
    })


class TestStripColumnNames:
    def test_trims_names(self):
        df = pd.DataFrame({"  Lcl Date": [1], " AltB ": [2]})
        assert list(strip_column_names(df).columns) == ["Lcl Date", "AltB"]

    def test_does_not_deduplicate(self):
        df = pd.DataFrame([[1, 2]], columns=[" AltB", "AltB "])
        assert list(strip_column_names(df).columns) == ["AltB", "AltB"]


class TestCleanStrings:
    def test_trims_text_cells(self):
        df = pd.DataFrame({
            "AtvWpt": pd.array([" KPOU ", None], dtype="string"),
            "AltB": [1.0, 2.0],
        })
        cleaned = clean_strings(df)

        assert cleaned["AtvWpt"].iloc[0] == "KPOU"
        assert pd.isna(cleaned["AtvWpt"].iloc[1])
        assert cleaned["AltB"].tolist() == [1.0, 2.0]

    def test_input_unchanged(self):
        df = pd.DataFrame({"AtvWpt": pd.array([" KPOU "], dtype="string")})
        clean_strings(df)
        assert df["AtvWpt"].iloc[0] == " KPOU "


class TestRemoveEmptyRows:
    def test_removes_only_all_null_rows(self):
        df = pd.DataFrame({
            "a": [None, None, 1.0],
            "b": pd.array([None, "x", None], dtype="string"),
            "c": [None, None, None],
        })
        cleaned = remove_empty_rows(df)

        assert len(cleaned) == 2
        assert cleaned["b"].iloc[0] == "x"
        assert cleaned["a"].iloc[1] == 1.0

    def test_preserves_order(self):
        df = pd.DataFrame({"a": [3.0, None, 1.0, 2.0]})
        assert remove_empty_rows(df)["a"].tolist() == [3.0, 1.0, 2.0]

    def test_whitespace_is_not_empty(self):
        df = pd.DataFrame({"a": pd.array([" ", None], dtype="string")})
        assert len(remove_empty_rows(df)) == 1


class TestParseTimestamp:
    def test_converts_to_utc(self, time_parts):
        df = parse_timestamp(time_parts, "Lcl Date", "Lcl Time", "UTCOfst", "Timestamp")

        assert df["Timestamp"].iloc[0] == pd.Timestamp("2023-11-04 12:48:13", tz="UTC")
        assert df["Timestamp"].iloc[0].strftime("%H:%M:%S") == "12:48:13"

    def test_crosses_midnight(self, time_parts):
        df = parse_timestamp(time_parts, "Lcl Date", "Lcl Time", "UTCOfst", "Timestamp")
        assert df["Timestamp"].iloc[1] == pd.Timestamp("2023-11-05 03:30:00", tz="UTC")

    def test_missing_part_gives_null(self, time_parts):
        df = parse_timestamp(time_parts, "Lcl Date", "Lcl Time", "UTCOfst", "Timestamp")
        assert pd.isna(df["Timestamp"].iloc[2])

    def test_column_layout(self, time_parts):
        df = parse_timestamp(time_parts, "Lcl Date", "Lcl Time", "UTCOfst", "Timestamp")
        assert list(df.columns) == ["AltB", "Timestamp"]
        assert str(df["Timestamp"].dtype) == "datetime64[us, UTC]"

    def test_keep_source_columns(self, time_parts):
        df = parse_timestamp(
            time_parts, "Lcl Date", "Lcl Time", "UTCOfst", "Timestamp", drop_source_cols=False
        )
        assert list(df.columns) == ["Lcl Date", "Lcl Time", "UTCOfst", "AltB", "Timestamp"]

    def test_bad_format_raises(self, time_parts):
        time_parts["Lcl Time"] = pd.array(["not a time", "08:48:14", "08:48:15"], dtype="string")
        with pytest.raises(TimestampFormat):
            parse_timestamp(time_parts, "Lcl Date", "Lcl Time", "UTCOfst", "Timestamp")

    def test_missing_source_column(self, time_parts):
        with pytest.raises(MissingRequiredColumn):
            parse_timestamp(time_parts, "Lcl Date", "Zulu Time", "UTCOfst", "Timestamp")


class TestCleanDataframe:
    def test_steps_in_order(self):
        df = pd.DataFrame({
            " AtvWpt": pd.array([" KPOU", None], dtype="string"),
            " AltB": [165.0, None],
        })
        cleaned = clean_dataframe(df)

        assert list(cleaned.columns) == ["AtvWpt", "AltB"]
        assert cleaned["AtvWpt"].tolist() == ["KPOU"]
