"""
SM-2 review scheduler.

This is a pure computation module with no I/O. The caller supplies `now`.
"""

import logging
import math

from cadence.domain.constants import (
    CONFIDENCE_ACCEPTABLE,
    CONFIDENCE_BLACKOUT,
    CONFIDENCE_GOOD,
    CONFIDENCE_PERFECT,
    FAILED_INTERVAL_DAYS,
    FIRST_INTERVAL_DAYS,
    INITIAL_EASE,
    MAX_QUALITY,
    MIN_EASE,
    MS_PER_DAY,
    PASSING_QUALITY,
    SECOND_INTERVAL_DAYS,
)
from cadence.domain.review.models import PerformanceSample, ReviewState

logger = logging.getLogger(__name__)


def quality_from_sample(sample: PerformanceSample) -> int:
    """
    Map correctness and confidence to an SM-2 quality score (0-5).

    Incorrect answers score 0 (blackout) or 2; correct answers score 2-5
    depending on how confident the learner was.
    """
    confidence = sample.clamped().confidence_percent

    if not sample.was_correct:
        return 0 if confidence < CONFIDENCE_BLACKOUT else 2

    if confidence >= CONFIDENCE_PERFECT:
        return 5
    if confidence >= CONFIDENCE_GOOD:
        return 4
    if confidence >= CONFIDENCE_ACCEPTABLE:
        return 3
    return 2


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class ReviewScheduler:
    """
    Converts one performance observation into the next review schedule.

    Stateless and side-effect free. A single instance can be shared by every
    caller in the host application.
    """

    def __init__(self, initial_ease: float = INITIAL_EASE, min_ease: float = MIN_EASE):
        """
        Args:
            initial_ease: Ease factor assumed for an item with no history.
            min_ease: Lower bound applied after every ease update.
        """
        self.initial_ease = initial_ease
        self.min_ease = min_ease

    def next_ease(self, ease_factor: float, quality: int) -> float:
        """
        EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)), floored at min_ease.
        """
        miss = MAX_QUALITY - quality
        return max(ease_factor + (0.1 - miss * (0.08 + miss * 0.02)), self.min_ease)

    def compute_next(
        self,
        previous: ReviewState | None,
        sample: PerformanceSample,
        now: int,
        *,
        owner_id: str = "",
        item_id: str = "",
    ) -> ReviewState:
        """
        Compute the schedule that follows `previous` after observing `sample`.

        Args:
            previous: Current state, or None for the first review of the item.
            sample: The observed answer. Out-of-range values are clamped.
            now: Instant of this review (epoch ms).
            owner_id: Owner for a first review; ignored when `previous` is given.
            item_id: Item for a first review; ignored when `previous` is given.

        Returns:
            A new ReviewState. `previous` is never mutated.
        """
        if previous is None:
            previous = ReviewState.new(owner_id, item_id, now, ease_factor=self.initial_ease)

        quality = quality_from_sample(sample)
        ease = self.next_ease(previous.ease_factor, quality)

        if quality < PASSING_QUALITY:
            interval = FAILED_INTERVAL_DAYS
            repetitions = 1
        else:
            if previous.repetition_count == 0:
                interval = FIRST_INTERVAL_DAYS
            elif previous.repetition_count == 1:
                interval = SECOND_INTERVAL_DAYS
            else:
                interval = _round_half_up(previous.interval_days * ease)
            repetitions = previous.repetition_count + 1

        interval = max(interval, 1)

        logger.debug(
            "item=%s owner=%s quality=%d ease=%.3f interval=%d reps=%d",
            previous.item_id,
            previous.owner_id,
            quality,
            ease,
            interval,
            repetitions,
        )

        return ReviewState(
            item_id=previous.item_id,
            owner_id=previous.owner_id,
            next_review_at=now + interval * MS_PER_DAY,
            interval_days=interval,
            ease_factor=ease,
            repetition_count=repetitions,
            last_reviewed_at=now,
        )
