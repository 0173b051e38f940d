# config/constants.py
"""
TrackLens - Constants
Dataset columns, popularity tiers, per-chart limits and colour palettes.
"""

from __future__ import annotations

from typing import Dict, Tuple

# ═══════════════════════════════════════════════════════════════════════════
# Dataset Columns
# ═══════════════════════════════════════════════════════════════════════════

COL_TRACK_NAME = "track_name"
COL_ARTIST_NAME = "artist_name"
COL_TRACK_POPULARITY = "track_popularity"
COL_ARTIST_POPULARITY = "artist_popularity"
COL_ARTIST_FOLLOWERS = "artist_followers"
COL_TRACK_DURATION_MS = "track_duration_ms"
COL_EXPLICIT = "explicit"
COL_ARTIST_GENRES = "artist_genres"

REQUIRED_COLUMNS: Tuple[str, ...] = (
    COL_TRACK_NAME,
    COL_ARTIST_NAME,
    COL_TRACK_POPULARITY,
    COL_ARTIST_POPULARITY,
    COL_ARTIST_FOLLOWERS,
    COL_TRACK_DURATION_MS,
    COL_EXPLICIT,
    COL_ARTIST_GENRES,
)

NUMERIC_COLUMNS: Tuple[str, ...] = (
    COL_TRACK_POPULARITY,
    COL_ARTIST_POPULARITY,
    COL_ARTIST_FOLLOWERS,
    COL_TRACK_DURATION_MS,
)

POPULARITY_RANGE: Tuple[float, float] = (0.0, 100.0)

CSV_DELIMITERS = [",", ";", "\t", "|"]
CSV_ENCODINGS = ["utf-8", "latin-1"]

# ═══════════════════════════════════════════════════════════════════════════
# Popularity Tiers
# ═══════════════════════════════════════════════════════════════════════════

# Half-open bands: value < 34 is Low, value < 67 is Medium, the rest High.
TIER_LOW = "Low"
TIER_MEDIUM = "Medium"
TIER_HIGH = "High"
TIER_ORDER: Tuple[str, ...] = (TIER_LOW, TIER_MEDIUM, TIER_HIGH)
TIER_THRESHOLDS: Tuple[Tuple[float, str], ...] = (
    (34.0, TIER_LOW),
    (67.0, TIER_MEDIUM),
)

# ═══════════════════════════════════════════════════════════════════════════
# Chart Limits
# ═══════════════════════════════════════════════════════════════════════════

BAR_TOP_N = 15
BUBBLE_TOP_N = 25
TREEMAP_TOP_N = 40
PARALLEL_TOP_N = 25
SPARKLINE_TOP_N = 15

SPARKLINE_BINS = 10

# ═══════════════════════════════════════════════════════════════════════════
# Metric Labels
# ═══════════════════════════════════════════════════════════════════════════

METRIC_LABELS: Dict[str, str] = {
    "count": "Tracks",
    COL_TRACK_POPULARITY: "Avg Track Popularity",
    COL_ARTIST_POPULARITY: "Avg Artist Popularity",
    COL_ARTIST_FOLLOWERS: "Avg Followers",
    COL_TRACK_DURATION_MS: "Avg Duration (min)",
    COL_EXPLICIT: "Explicit Share",
    "correlation": "Artist vs Track Popularity (r)",
}

# ═══════════════════════════════════════════════════════════════════════════
# Colour Palettes
# ═══════════════════════════════════════════════════════════════════════════

COLOR_PALETTE_PRIMARY = [
    "#1DB954", "#2563EB", "#7C3AED", "#D97706", "#DC2626",
    "#0EA5E9", "#9333EA", "#059669", "#F43F5E", "#10B981",
]

TIER_COLORS: Dict[str, str] = {
    TIER_LOW: "#94A3B8",
    TIER_MEDIUM: "#60A5FA",
    TIER_HIGH: "#1DB954",
}

# Correlation colour scale and the neutral colour used for undefined r.
CORRELATION_COLORSCALE = "RdBu"
NEUTRAL_COLOR = "#BDBDBD"
