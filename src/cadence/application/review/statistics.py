"""
Read-side statistics over an owner's review states.

This is a pure computation module with no I/O.
"""

from collections.abc import Iterable

from cadence.domain.constants import MATURE_REPETITIONS
from cadence.domain.review.models import (
    AggregateStatistics,
    PerformanceSample,
    PerformanceSummary,
    ReviewState,
)


class StatisticsAggregator:
    """
    Partitions review states into due/new/learning/mature buckets.

    Stateless and side-effect free.
    """

    def due_items(self, states: Iterable[ReviewState], now: int) -> list[ReviewState]:
        """
        Return states whose next review is at or before `now`.

        Sorted by next_review_at ascending; ties keep input order.
        """
        due = [state for state in states if state.is_due(now)]
        return sorted(due, key=lambda s: s.next_review_at)

    def summarize(self, states: Iterable[ReviewState], now: int) -> AggregateStatistics:
        """
        Count states per bucket and average their ease factors.

        An empty collection yields zero counts and average_ease_factor=None.
        """
        total = due = new = learning = mature = 0
        ease_sum = 0.0

        for state in states:
            total += 1
            ease_sum += state.ease_factor
            is_due = state.is_due(now)

            if is_due:
                due += 1
            if state.repetition_count == 0:
                new += 1
            elif not is_due:
                if state.repetition_count < MATURE_REPETITIONS:
                    learning += 1
                else:
                    mature += 1

        return AggregateStatistics(
            total=total,
            due_count=due,
            new_count=new,
            learning_count=learning,
            mature_count=mature,
            average_ease_factor=ease_sum / total if total else None,
        )


def summarize_performance(samples: Iterable[PerformanceSample]) -> PerformanceSummary:
    """
    Average correctness, confidence and response time over answer samples.

    Empty input yields count=0 and None averages.
    """
    clamped = [s.clamped() for s in samples]
    if not clamped:
        return PerformanceSummary(
            count=0, correct_rate=None, average_confidence=None, average_response_time=None
        )

    count = len(clamped)
    return PerformanceSummary(
        count=count,
        correct_rate=sum(1 for s in clamped if s.was_correct) / count,
        average_confidence=sum(s.confidence_percent for s in clamped) / count,
        average_response_time=sum(s.response_time_seconds for s in clamped) / count,
    )
