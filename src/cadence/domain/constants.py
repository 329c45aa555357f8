"""Centralized constants for cadence.

All magic numbers and tuning defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Time ----------
MS_PER_DAY = 86_400_000

# ---------- SM-2 ----------
INITIAL_EASE = 2.5
MIN_EASE = 1.3
PASSING_QUALITY = 3
MAX_QUALITY = 5
FIRST_INTERVAL_DAYS = 1
SECOND_INTERVAL_DAYS = 3
FAILED_INTERVAL_DAYS = 1

# Confidence (percent) cut-offs for mapping an answer to an SM-2 quality score
CONFIDENCE_PERFECT = 90
CONFIDENCE_GOOD = 75
CONFIDENCE_ACCEPTABLE = 50
CONFIDENCE_BLACKOUT = 30

# ---------- Statistics ----------
MATURE_REPETITIONS = 3

# ---------- Difficulty Adapter ----------
PROMOTE_THRESHOLD = 0.8  # strictly greater than
DEMOTE_THRESHOLD = 0.4  # strictly less than

CORRECT_POINTS = 40
INCORRECT_POINTS = 10
SPEED_POINTS = ((0.5, 30), (1.0, 20), (2.0, 10))  # (ratio upper bound, points)
HISTORY_POINTS = 30

# ---------- Recommendations ----------
MANY_DUE_THRESHOLD = 5
HEAVY_LEARNING_THRESHOLD = 10
LOW_EASE_THRESHOLD = 1.5

# ---------- Service ----------
DEFAULT_PERFORMANCE_WINDOW = 20
DEFAULT_MAX_QUEUE_SIZE = 50
DEFAULT_HISTORICAL_ACCURACY = 0.5
