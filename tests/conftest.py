"""
TrackLens - Pytest Configuration
Shared fixtures and configuration for all tests
"""

import math
import sys
from pathlib import Path

import pytest

# Add project root to path
ROOT_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT_DIR))

from config.settings import settings
from core.schema import TrackRecord


CSV_HEADER = (
    "track_name,artist_name,track_popularity,artist_popularity,"
    "artist_followers,track_duration_ms,explicit,artist_genres"
)


# ==================== RECORD FIXTURES ====================

@pytest.fixture
def make_record():
    """Factory for TrackRecord with sensible defaults"""
    def _make(
        artist="A",
        track_popularity=50.0,
        artist_popularity=50.0,
        followers=1000.0,
        duration_ms=200_000.0,
        explicit=False,
        genres=("pop",),
        track="t",
    ):
        return TrackRecord(
            track_name=track,
            artist_name=artist,
            track_popularity=track_popularity,
            artist_popularity=artist_popularity,
            artist_followers=followers,
            track_duration_ms=duration_ms,
            explicit=explicit,
            artist_genres=list(genres),
        )

    return _make


@pytest.fixture
def sample_records(make_record):
    """Small mixed dataset: three artists, overlapping genres, one bad row"""
    return [
        make_record("A", 10, 40, 500, 180_000, False, ("pop", "rock"), "a1"),
        make_record("A", 20, 40, 500, 240_000, True, ("pop",), "a2"),
        make_record("A", 30, 40, 500, 210_000, False, ("rock",), "a3"),
        make_record("B", 90, 80, 90_000, 200_000, True, ("hip hop",), "b1"),
        make_record("C", 60, 70, 0, 150_000, False, ("pop",), "c1"),
        make_record("D", math.nan, 20, 100, 100_000, False, (), "d1"),
    ]


# ==================== FILE FIXTURES ====================

@pytest.fixture
def csv_text():
    """Well-formed CSV with genre lists and one non-numeric cell"""
    rows = [
        CSV_HEADER,
        "Song 1,A,10,40,500,180000,True,\"['pop', 'rock']\"",
        "Song 2,A,20,40,500,240000,False,['pop']",
        "Song 3,B,abc,80,90000,200000,false,['hip hop' / 'rap']",
        "Song 4,C,60,70,1200,150000,TRUE,[]",
    ]
    return "\n".join(rows) + "\n"


@pytest.fixture
def tracks_csv(tmp_path, csv_text):
    """CSV file on disk"""
    path = tmp_path / "tracks.csv"
    path.write_text(csv_text, encoding="utf-8")
    return path


# ==================== CONFIGURATION FIXTURES ====================

@pytest.fixture
def test_settings():
    """Test settings"""
    original_test_mode = settings.TEST_MODE
    settings.TEST_MODE = True

    yield settings

    settings.TEST_MODE = original_test_mode


# ==================== PYTEST CONFIGURATION ====================

def pytest_configure(config):
    """Configure pytest"""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests that wire several modules together"
    )
