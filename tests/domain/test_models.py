import pytest

from cadence.domain.errors import CadenceError, UnknownTierError
from cadence.domain.review.models import DifficultyTier, PerformanceSample, ReviewState

NOW = 1_700_000_000_000


def test_tiers_are_ordered():
    assert DifficultyTier.EASY < DifficultyTier.MEDIUM < DifficultyTier.HARD < DifficultyTier.EXPERT
    assert sorted([DifficultyTier.EXPERT, DifficultyTier.EASY, DifficultyTier.HARD]) == [
        DifficultyTier.EASY,
        DifficultyTier.HARD,
        DifficultyTier.EXPERT,
    ]


def test_tier_step_clamps():
    assert DifficultyTier.MEDIUM.step(1) is DifficultyTier.HARD
    assert DifficultyTier.EXPERT.step(1) is DifficultyTier.EXPERT
    assert DifficultyTier.EASY.step(-1) is DifficultyTier.EASY
    assert DifficultyTier.EASY.step(10) is DifficultyTier.EXPERT


def test_tier_parse():
    assert DifficultyTier.parse("Hard ") is DifficultyTier.HARD
    assert DifficultyTier.parse(DifficultyTier.EASY) is DifficultyTier.EASY

    with pytest.raises(UnknownTierError) as exc:
        DifficultyTier.parse("legendary")
    assert exc.value.label == "legendary"
    assert isinstance(exc.value, CadenceError)


def test_seed_state():
    state = ReviewState.new("alice", "verbs-1", NOW)

    assert state.repetition_count == 0
    assert state.interval_days == 0
    assert state.ease_factor == 2.5
    assert state.is_due(NOW)
    assert not state.is_due(NOW - 1)


def test_state_from_dict_coerces_types(make_state):
    state = make_state()
    raw = {k: str(v) for k, v in state.to_dict().items()}
    assert ReviewState.from_dict(raw) == state


def test_sample_clamped():
    assert PerformanceSample(True, 140, -3.0).clamped() == PerformanceSample(True, 100, 0.0)
    assert PerformanceSample(False, -5, 2.0).clamped() == PerformanceSample(False, 0, 2.0)

    in_range = PerformanceSample(True, 50, 2.0)
    assert in_range.clamped() is in_range


def test_sample_clamped_non_finite():
    sample = PerformanceSample(True, float("nan"), float("inf")).clamped()
    assert sample.confidence_percent == 0
    assert sample.response_time_seconds == 0.0
