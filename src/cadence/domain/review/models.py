"""
Domain models for review scheduling.

These are pure data structures with no I/O or external dependencies.
Instants are epoch milliseconds.
"""

import math
from dataclasses import dataclass, replace
from enum import Enum

from cadence.domain.constants import INITIAL_EASE
from cadence.domain.errors import UnknownTierError


class DifficultyTier(str, Enum):
    """Ordered difficulty labels: easy < medium < hard < expert."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"

    @property
    def rank(self) -> int:
        return _TIER_ORDER.index(self)

    def step(self, delta: int) -> "DifficultyTier":
        """Move `delta` tiers up (positive) or down (negative), clamped at the ends."""
        index = min(max(self.rank + delta, 0), len(_TIER_ORDER) - 1)
        return _TIER_ORDER[index]

    def __lt__(self, other):
        if not isinstance(other, DifficultyTier):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, DifficultyTier):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, DifficultyTier):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, DifficultyTier):
            return NotImplemented
        return self.rank >= other.rank

    @classmethod
    def parse(cls, label: "str | DifficultyTier") -> "DifficultyTier":
        if isinstance(label, DifficultyTier):
            return label
        try:
            return cls(str(label).strip().lower())
        except ValueError:
            raise UnknownTierError(str(label)) from None


_TIER_ORDER = list(DifficultyTier)


@dataclass(frozen=True)
class ReviewState:
    """
    Scheduling state for one (owner, item) pair.

    Attributes:
        item_id: Opaque learning item identifier.
        owner_id: The learner the schedule belongs to.
        next_review_at: When the item should next be shown (epoch ms).
        interval_days: Days between the last review and the next one.
        ease_factor: SM-2 multiplier controlling interval growth.
        repetition_count: Consecutive passing reviews in the current cycle.
        last_reviewed_at: When the state was last computed (epoch ms).
    """

    item_id: str
    owner_id: str
    next_review_at: int
    interval_days: int
    ease_factor: float
    repetition_count: int
    last_reviewed_at: int

    @classmethod
    def new(
        cls, owner_id: str, item_id: str, now: int, ease_factor: float = INITIAL_EASE
    ) -> "ReviewState":
        """Seed state for an item that has never been reviewed."""
        return cls(
            item_id=item_id,
            owner_id=owner_id,
            next_review_at=now,
            interval_days=0,
            ease_factor=ease_factor,
            repetition_count=0,
            last_reviewed_at=now,
        )

    def is_due(self, now: int) -> bool:
        return self.next_review_at <= now

    def to_dict(self) -> dict:
        return {
            "item_id": self.item_id,
            "owner_id": self.owner_id,
            "next_review_at": self.next_review_at,
            "interval_days": self.interval_days,
            "ease_factor": self.ease_factor,
            "repetition_count": self.repetition_count,
            "last_reviewed_at": self.last_reviewed_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ReviewState":
        return cls(
            item_id=str(data["item_id"]),
            owner_id=str(data["owner_id"]),
            next_review_at=int(data["next_review_at"]),
            interval_days=int(data["interval_days"]),
            ease_factor=float(data["ease_factor"]),
            repetition_count=int(data["repetition_count"]),
            last_reviewed_at=int(data["last_reviewed_at"]),
        )


def _finite_or(value: float, default: float) -> float:
    return value if math.isfinite(value) else default


@dataclass(frozen=True)
class PerformanceSample:
    """
    One observed answer.

    Attributes:
        was_correct: Whether the learner answered correctly.
        confidence_percent: Self-rated or derived confidence (0-100).
        response_time_seconds: Time taken to answer.
    """

    was_correct: bool
    confidence_percent: int
    response_time_seconds: float = 0.0

    def clamped(self) -> "PerformanceSample":
        """Return a copy with confidence in [0, 100] and a non-negative response time."""
        confidence = _finite_or(float(self.confidence_percent), 0.0)
        confidence = int(min(max(round(confidence), 0), 100))
        elapsed = max(_finite_or(float(self.response_time_seconds), 0.0), 0.0)
        if confidence == self.confidence_percent and elapsed == self.response_time_seconds:
            return self
        return replace(self, confidence_percent=confidence, response_time_seconds=elapsed)

    def to_dict(self) -> dict:
        return {
            "was_correct": self.was_correct,
            "confidence_percent": self.confidence_percent,
            "response_time_seconds": self.response_time_seconds,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PerformanceSample":
        return cls(
            was_correct=bool(data["was_correct"]),
            confidence_percent=int(data["confidence_percent"]),
            response_time_seconds=float(data.get("response_time_seconds", 0.0)),
        )


@dataclass(frozen=True)
class AggregateStatistics:
    """
    Summary of all review states for one owner.

    `average_ease_factor` is None when there are no states.
    """

    total: int
    due_count: int
    new_count: int
    learning_count: int
    mature_count: int
    average_ease_factor: float | None


@dataclass(frozen=True)
class PerformanceSummary:
    """Recent answer performance for one owner."""

    count: int
    correct_rate: float | None
    average_confidence: float | None
    average_response_time: float | None
