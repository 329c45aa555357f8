import pytest

from cadence.application.review.statistics import StatisticsAggregator, summarize_performance
from cadence.domain.constants import MS_PER_DAY
from cadence.domain.review.models import PerformanceSample

NOW = 1_700_000_000_000


@pytest.fixture
def aggregator():
    return StatisticsAggregator()


@pytest.fixture
def states(make_state):
    return [
        make_state(item_id="fresh", repetition_count=0, next_review_at=NOW, ease_factor=2.5),
        make_state(item_id="learning", repetition_count=1, next_review_at=NOW + MS_PER_DAY),
        make_state(item_id="overdue", repetition_count=2, next_review_at=NOW - 1, ease_factor=2.0),
        make_state(
            item_id="mature", repetition_count=5, next_review_at=NOW + 10 * MS_PER_DAY,
            ease_factor=3.0,
        ),
        make_state(item_id="due-now", repetition_count=3, next_review_at=NOW, ease_factor=1.5),
    ]


def test_due_items_sorted_and_inclusive(aggregator, states):
    due = aggregator.due_items(states, NOW)
    assert [s.item_id for s in due] == ["overdue", "fresh", "due-now"]


def test_due_items_empty(aggregator):
    assert aggregator.due_items([], NOW) == []


def test_summarize_buckets(aggregator, states):
    summary = aggregator.summarize(states, NOW)

    assert summary.total == 5
    assert summary.due_count == 3
    assert summary.new_count == 1
    assert summary.learning_count == 1
    assert summary.mature_count == 1
    assert summary.average_ease_factor == pytest.approx(11.5 / 5)


def test_summarize_due_items_leave_learning_and_mature(aggregator, make_state):
    later = NOW + 30 * MS_PER_DAY
    summary = aggregator.summarize(
        [make_state(repetition_count=1), make_state(item_id="b", repetition_count=4)], later
    )

    assert summary.due_count == 2
    assert summary.learning_count == 0
    assert summary.mature_count == 0


def test_summarize_empty_is_defined(aggregator):
    summary = aggregator.summarize([], NOW)

    assert summary.total == 0
    assert summary.due_count == 0
    assert summary.new_count == 0
    assert summary.learning_count == 0
    assert summary.mature_count == 0
    assert summary.average_ease_factor is None


def test_summarize_accepts_generators(aggregator, states):
    assert aggregator.summarize((s for s in states), NOW).total == 5


def test_summarize_performance():
    summary = summarize_performance(
        [
            PerformanceSample(True, 90, 4.0),
            PerformanceSample(False, 20, 12.0),
            PerformanceSample(True, 130, -1.0),
        ]
    )

    assert summary.count == 3
    assert summary.correct_rate == pytest.approx(2 / 3)
    assert summary.average_confidence == pytest.approx(70.0)
    assert summary.average_response_time == pytest.approx(16 / 3)


def test_summarize_performance_empty():
    summary = summarize_performance([])
    assert summary.count == 0
    assert summary.correct_rate is None
    assert summary.average_confidence is None
    assert summary.average_response_time is None
