import pytest

from cadence.domain.constants import MS_PER_DAY
from cadence.domain.review.models import ReviewState

# 2023-11-14T22:13:20Z
NOW = 1_700_000_000_000
DAY = MS_PER_DAY


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_state():
    """Factory for ReviewState with sensible defaults."""

    def _make(
        item_id="item-1",
        owner_id="alice",
        next_review_at=NOW + DAY,
        interval_days=1,
        ease_factor=2.5,
        repetition_count=1,
        last_reviewed_at=NOW,
    ):
        return ReviewState(
            item_id=item_id,
            owner_id=owner_id,
            next_review_at=next_review_at,
            interval_days=interval_days,
            ease_factor=ease_factor,
            repetition_count=repetition_count,
            last_reviewed_at=last_reviewed_at,
        )

    return _make


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Isolate config files and the default store from the real home
    monkeypatch.setenv("HOME", str(home))
    for var in (
        "CADENCE_BACKEND",
        "CADENCE_STORE_PATH",
        "CADENCE_LOG_DIR",
        "CADENCE_MIN_EASE",
        "CADENCE_INITIAL_EASE",
        "CADENCE_MAX_QUEUE_SIZE",
        "CADENCE_VERBOSE",
    ):
        monkeypatch.delenv(var, raising=False)
    return home
