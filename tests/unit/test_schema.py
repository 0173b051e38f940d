"""
TrackLens - Unit Tests for the Record Schema
"""

import math

import pytest
from pydantic import ValidationError

from core.schema import TrackRecord, coerce_number, parse_explicit, parse_genres


class TestParseGenres:
    """Tests for parse_genres function"""

    def test_slash_separated_with_quotes(self):
        assert parse_genres("['pop' / 'rock']") == ("pop", "rock")

    def test_list_literal(self):
        assert parse_genres("['dance pop', 'edm', \"uk pop\"]") == ("dance pop", "edm", "uk pop")

    def test_empty_list_literal(self):
        assert parse_genres("[]") == ()

    def test_drops_empty_tokens_and_whitespace(self):
        assert parse_genres(" pop ,, / rock ,") == ("pop", "rock")

    def test_duplicates_collapse_to_first(self):
        assert parse_genres("rock, pop, rock") == ("rock", "pop")

    def test_non_string_input(self):
        assert parse_genres(None) == ()
        assert parse_genres(math.nan) == ()

    def test_list_input(self):
        assert parse_genres(["pop", "k-pop"]) == ("pop", "k-pop")


class TestFieldCoercion:
    """Tests for numeric and boolean coercion"""

    def test_coerce_number(self):
        assert coerce_number(" 12 ") == 12.0
        assert coerce_number(7) == 7.0

    @pytest.mark.parametrize("value", ["abc", "", None, "inf", True, math.nan])
    def test_coerce_number_invalid(self, value):
        assert math.isnan(coerce_number(value))

    @pytest.mark.parametrize("value", ["True", "true", " TRUE ", True])
    def test_explicit_true(self, value):
        assert parse_explicit(value) is True

    @pytest.mark.parametrize("value", ["False", "yes", "1", 1, None, ""])
    def test_explicit_false(self, value):
        assert parse_explicit(value) is False


class TestTrackRecord:
    """Tests for TrackRecord model"""

    def test_from_row(self):
        record = TrackRecord.from_row({
            "track_name": " Song ",
            "artist_name": "Artist",
            "track_popularity": "55",
            "artist_popularity": "abc",
            "artist_followers": "1200",
            "track_duration_ms": "180000",
            "explicit": "True",
            "artist_genres": "['pop', 'rock']",
            "extra_column": "ignored",
        })
        assert record.track_name == "Song"
        assert record.track_popularity == 55.0
        assert math.isnan(record.artist_popularity)
        assert record.explicit is True
        assert record.artist_genres == ("pop", "rock")

    def test_defaults_are_invalid_measures(self):
        record = TrackRecord()
        assert record.artist_name == ""
        assert math.isnan(record.track_popularity)
        assert record.artist_genres == ()

    def test_measure(self, make_record):
        record = make_record(track_popularity=42, explicit=True)
        assert record.measure("track_popularity") == 42.0
        assert record.measure("explicit") == 1.0

    def test_unknown_measure_raises(self, make_record):
        with pytest.raises(KeyError):
            make_record().measure("danceability")

    def test_record_is_frozen(self, make_record):
        record = make_record()
        with pytest.raises(ValidationError):
            record.track_popularity = 1.0
