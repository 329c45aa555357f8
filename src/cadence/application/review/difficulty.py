"""
Adaptive difficulty: confidence scoring, tier suggestions and study guidance.

This is a pure computation module with no I/O.
"""

import logging
import math

from cadence.domain.constants import (
    CORRECT_POINTS,
    DEMOTE_THRESHOLD,
    HEAVY_LEARNING_THRESHOLD,
    HISTORY_POINTS,
    INCORRECT_POINTS,
    LOW_EASE_THRESHOLD,
    MANY_DUE_THRESHOLD,
    PROMOTE_THRESHOLD,
    SPEED_POINTS,
)
from cadence.domain.review.models import AggregateStatistics, DifficultyTier

logger = logging.getLogger(__name__)

MANY_DUE_MESSAGE = "You have many reviews waiting. Start with those!"
HEAVY_LEARNING_MESSAGE = "You are carrying a heavy learning load. Consider adding more practice time."
NEW_ITEMS_MESSAGE = "New items are available. Try some today!"
LOW_EASE_MESSAGE = "The material seems hard for you. Consider reviewing the fundamentals."
ALL_GOOD_MESSAGE = "You're doing great! Keep going!"


def _unit(value: float) -> float:
    if not math.isfinite(value):
        return 0.0
    return min(max(value, 0.0), 1.0)


class DifficultyAdapter:
    """
    Proposes the next difficulty tier from recent performance.

    Stateless and side-effect free.
    """

    def score_confidence(
        self,
        was_correct: bool,
        response_time_seconds: float,
        average_response_time_seconds: float,
        historical_accuracy: float,
    ) -> int:
        """
        Derive a 0-100 confidence score from raw answer signals.

        Correctness contributes 40 (or 10 when wrong), speed relative to the
        learner's average up to 30, and historical accuracy up to 30.
        """
        score = CORRECT_POINTS if was_correct else INCORRECT_POINTS

        # NaN counts as instant; an unbounded wait lands in the slowest band
        elapsed = 0.0 if math.isnan(response_time_seconds) else max(response_time_seconds, 0.0)
        if not math.isfinite(average_response_time_seconds) or average_response_time_seconds <= 0:
            ratio = 1.0
        else:
            ratio = elapsed / average_response_time_seconds

        for upper, points in SPEED_POINTS:
            if ratio < upper:
                score += points
                break

        score += int(math.floor(_unit(historical_accuracy) * HISTORY_POINTS + 0.5))
        return score

    def suggest_next_tier(
        self,
        current_tier: DifficultyTier | str,
        correct_rate: float,
        confidence_percent: float,
    ) -> DifficultyTier:
        """
        Move at most one tier based on correct_rate * confidence.

        Above 0.8 promotes, below 0.4 demotes, anything else keeps the tier.
        """
        tier = DifficultyTier.parse(current_tier)
        confidence = min(max(confidence_percent, 0), 100) if math.isfinite(confidence_percent) else 0
        performance = _unit(correct_rate) * (confidence / 100)

        if performance > PROMOTE_THRESHOLD:
            suggested = tier.step(1)
        elif performance < DEMOTE_THRESHOLD:
            suggested = tier.step(-1)
        else:
            suggested = tier

        if suggested is not tier:
            logger.debug("performance=%.3f moves %s -> %s", performance, tier.value, suggested.value)
        return suggested

    def build_recommendations(self, stats: AggregateStatistics) -> list[str]:
        """
        Turn aggregate statistics into short guidance, in check order.

        Always returns at least one message.
        """
        recommendations: list[str] = []

        if stats.due_count > MANY_DUE_THRESHOLD:
            recommendations.append(MANY_DUE_MESSAGE)

        if stats.learning_count > HEAVY_LEARNING_THRESHOLD:
            recommendations.append(HEAVY_LEARNING_MESSAGE)

        if stats.new_count > 0:
            recommendations.append(NEW_ITEMS_MESSAGE)

        if stats.average_ease_factor is not None and stats.average_ease_factor < LOW_EASE_THRESHOLD:
            recommendations.append(LOW_EASE_MESSAGE)

        if not recommendations:
            recommendations.append(ALL_GOOD_MESSAGE)

        return recommendations
