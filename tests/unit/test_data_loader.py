"""
TrackLens - Unit Tests for the Record Loader and Dataset Validator
"""

import asyncio
import io
import math

import pandas as pd
import pytest
from loguru import logger

from core.data_loader import (
    RecordLoader,
    load_records,
    load_records_async,
    load_records_or_empty,
)
from core.data_validator import DataValidator
from core.exceptions import DataSourceError, ErrorCode, SchemaValidationError

CSV_HEADER = (
    "track_name,artist_name,track_popularity,artist_popularity,"
    "artist_followers,track_duration_ms,explicit,artist_genres"
)


class TestRecordLoader:
    """Tests for RecordLoader"""

    def test_loads_all_rows(self, tracks_csv):
        records = load_records(tracks_csv)
        assert [r.track_name for r in records] == ["Song 1", "Song 2", "Song 3", "Song 4"]

    def test_field_coercion(self, tracks_csv):
        first, _, third, fourth = load_records(tracks_csv)
        assert first.artist_genres == ("pop", "rock")
        assert first.explicit is True
        assert math.isnan(third.track_popularity)
        assert third.artist_genres == ("hip hop", "rap")
        assert third.explicit is False
        assert fourth.artist_genres == ()
        assert fourth.explicit is True

    def test_accepts_text_stream(self, csv_text):
        assert len(load_records(io.StringIO(csv_text))) == 4

    def test_semicolon_delimiter(self):
        text = CSV_HEADER.replace(",", ";") + "\nSong;A;10;40;500;180000;False;['pop']\n"
        records = load_records(io.StringIO(text))
        assert len(records) == 1
        assert records[0].track_popularity == 10.0

    def test_latin1_fallback(self):
        text = CSV_HEADER + "\nCanción,A,10,40,500,180000,False,['pop']\n"
        records = load_records(io.BytesIO(text.encode("latin-1")))
        assert records[0].track_name == "Canción"

    def test_byte_order_mark(self, csv_text):
        records = load_records(io.BytesIO(("\ufeff" + csv_text).encode("utf-8")))
        assert records[0].track_name == "Song 1"

    def test_extra_columns_are_ignored(self):
        text = CSV_HEADER + ",energy\nSong,A,10,40,500,180000,False,['pop'],0.7\n"
        assert len(load_records(io.StringIO(text))) == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataSourceError):
            load_records(tmp_path / "nope.csv")

    def test_empty_source(self):
        with pytest.raises(DataSourceError):
            load_records(io.StringIO("   \n"))

    def test_missing_columns(self):
        with pytest.raises(SchemaValidationError) as exc_info:
            load_records(io.StringIO("track_name,artist_name\nSong,A\n"))
        assert exc_info.value.error_code == ErrorCode.SCHEMA
        assert "track_popularity" in exc_info.value.details["missing"]

    def test_read_frame_coerces_numeric_columns(self, tracks_csv):
        df = RecordLoader().read_frame(tracks_csv)
        assert pd.api.types.is_float_dtype(df["track_popularity"])
        assert df["track_popularity"].isna().sum() == 1


class TestLoadOrEmpty:
    """Failures surface as empty data"""

    def test_missing_file_gives_empty_list(self, tmp_path):
        assert load_records_or_empty(tmp_path / "nope.csv") == []

    def test_bad_schema_gives_empty_list(self):
        assert load_records_or_empty(io.StringIO("a,b\n1,2\n")) == []

    def test_failure_is_one_warning_and_no_error(self, tmp_path):
        levels = []
        sink_id = logger.add(lambda message: levels.append(message.record["level"].name), level="DEBUG")
        try:
            load_records_or_empty(tmp_path / "nope.csv")
        finally:
            logger.remove(sink_id)
        assert levels.count("WARNING") == 1
        assert "ERROR" not in levels

    def test_async_load(self, tracks_csv):
        records = asyncio.run(load_records_async(tracks_csv))
        assert len(records) == 4

    def test_async_load_failure(self, tmp_path):
        assert asyncio.run(load_records_async(tmp_path / "nope.csv")) == []


class TestDataValidator:
    """Tests for DataValidator"""

    def test_valid_dataset_report(self, tracks_csv):
        result = DataValidator().validate(RecordLoader().read_frame(tracks_csv))
        assert result.is_valid
        assert result.info["n_rows"] == 4
        assert result.info["n_genres"] == 4
        assert result.info["invalid_numeric"]["track_popularity"] == 1
        assert any("track_popularity" in w for w in result.warnings)
        assert any("no genres" in w for w in result.warnings)

    def test_missing_columns_is_error(self):
        result = DataValidator().validate(pd.DataFrame({"track_name": ["x"]}))
        assert not result.is_valid
        assert any("Missing required columns" in e for e in result.errors)

    def test_range_warnings(self):
        df = pd.DataFrame({
            "track_popularity": [120, 50],
            "artist_popularity": [50, -1],
            "artist_followers": [0, -5],
            "track_duration_ms": [0, 1000],
            "artist_genres": ["pop", "rock"],
        })
        result = DataValidator().validate(df)
        joined = " ".join(result.warnings)
        assert "outside 0-100" in joined
        assert "non-positive durations" in joined
        assert "negative values" in joined
        assert "zero values" in joined

    def test_empty_frame_warns(self):
        result = DataValidator().validate(pd.DataFrame())
        assert "Dataset has no rows" in result.warnings
