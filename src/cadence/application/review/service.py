"""
Review Service — Application layer orchestrator.

Coordinates the repository, the scheduler, the difficulty adapter and the
statistics aggregator for the answer-submission and content-delivery paths.
"""

import asyncio
import logging
import random
import time
import weakref
from collections.abc import Callable

from cadence.application.utils.shuffle import fisher_yates_shuffle
from cadence.domain.constants import (
    DEFAULT_HISTORICAL_ACCURACY,
    DEFAULT_MAX_QUEUE_SIZE,
    DEFAULT_PERFORMANCE_WINDOW,
)
from cadence.domain.review.models import (
    AggregateStatistics,
    DifficultyTier,
    PerformanceSample,
    ReviewState,
)
from cadence.domain.review.ports import ReviewRepository

from .difficulty import DifficultyAdapter
from .scheduler import ReviewScheduler
from .statistics import StatisticsAggregator, summarize_performance

logger = logging.getLogger(__name__)


def epoch_ms() -> int:
    return int(time.time() * 1000)


class ReviewService:
    """
    Application service for recording answers and planning study sessions.

    Follows Dependency Inversion: depends on the ReviewRepository abstraction,
    not concrete adapter implementations. Read-modify-write on a single
    (owner, item) pair is serialized with a per-key lock.
    """

    def __init__(
        self,
        repo: ReviewRepository,
        scheduler: ReviewScheduler | None = None,
        adapter: DifficultyAdapter | None = None,
        aggregator: StatisticsAggregator | None = None,
        clock: Callable[[], int] | None = None,
        performance_window: int = DEFAULT_PERFORMANCE_WINDOW,
        max_queue_size: int = DEFAULT_MAX_QUEUE_SIZE,
    ):
        """
        Args:
            repo: The repository (port) holding states and answer history.
            scheduler: Optional custom scheduler; uses default if not provided.
            adapter: Optional custom difficulty adapter.
            aggregator: Optional custom statistics aggregator.
            clock: Returns the current instant in epoch ms.
            performance_window: Number of recent answers used for derived signals.
            max_queue_size: Queue length used when no limit is given.
        """
        self._repo = repo
        self._scheduler = scheduler or ReviewScheduler()
        self._adapter = adapter or DifficultyAdapter()
        self._aggregator = aggregator or StatisticsAggregator()
        self._clock = clock or epoch_ms
        self._window = max(performance_window, 1)
        self._max_queue_size = max_queue_size
        # Entries vanish once no caller holds or waits on the lock
        self._locks: weakref.WeakValueDictionary[tuple[str, str], asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def _lock_for(self, owner_id: str, item_id: str) -> asyncio.Lock:
        key = (owner_id, item_id)
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    async def derive_confidence(
        self, owner_id: str, was_correct: bool, response_time_seconds: float
    ) -> int:
        """
        Estimate confidence from the answer and the owner's recent history.

        With no history the average time equals this answer's time and
        historical accuracy defaults to 0.5.
        """
        history = await self._repo.recent_samples(owner_id, self._window)
        summary = summarize_performance(history)

        if summary.count == 0:
            average_time = response_time_seconds
            accuracy = DEFAULT_HISTORICAL_ACCURACY
        else:
            average_time = summary.average_response_time
            accuracy = summary.correct_rate

        return self._adapter.score_confidence(
            was_correct, response_time_seconds, average_time, accuracy
        )

    async def record_answer(
        self,
        owner_id: str,
        item_id: str,
        was_correct: bool,
        response_time_seconds: float,
        confidence_percent: int | None = None,
    ) -> ReviewState:
        """
        Apply one answer to the (owner, item) schedule and persist the result.

        Args:
            owner_id: The learner.
            item_id: The item that was answered.
            was_correct: Whether the answer was correct.
            response_time_seconds: Time taken to answer.
            confidence_percent: Self-rated confidence; derived if not provided.

        Returns:
            The newly stored ReviewState.
        """
        lock = self._lock_for(owner_id, item_id)
        async with lock:
            if confidence_percent is None:
                confidence_percent = await self.derive_confidence(
                    owner_id, was_correct, response_time_seconds
                )

            sample = PerformanceSample(
                was_correct=was_correct,
                confidence_percent=confidence_percent,
                response_time_seconds=response_time_seconds,
            ).clamped()

            previous = await self._repo.get_state(owner_id, item_id)
            state = self._scheduler.compute_next(
                previous, sample, self._clock(), owner_id=owner_id, item_id=item_id
            )

            await self._repo.save_state(state)
            await self._repo.append_sample(owner_id, item_id, sample)

        logger.info(
            "Recorded %s answer for %s/%s: next review in %d day(s)",
            "correct" if was_correct else "incorrect",
            owner_id,
            item_id,
            state.interval_days,
        )
        return state

    async def enroll_item(self, owner_id: str, item_id: str) -> ReviewState:
        """
        Register an item the owner has not reviewed yet.

        Existing states are returned untouched.
        """
        lock = self._lock_for(owner_id, item_id)
        async with lock:
            existing = await self._repo.get_state(owner_id, item_id)
            if existing is not None:
                return existing

            state = ReviewState.new(
                owner_id, item_id, self._clock(), ease_factor=self._scheduler.initial_ease
            )
            await self._repo.save_state(state)
        return state

    async def get_state(self, owner_id: str, item_id: str) -> ReviewState | None:
        return await self._repo.get_state(owner_id, item_id)

    async def due_items(self, owner_id: str) -> list[ReviewState]:
        """Fetch the owner's due states, most overdue first."""
        states = await self._repo.list_states(owner_id)
        return self._aggregator.due_items(states, self._clock())

    async def summarize(self, owner_id: str) -> AggregateStatistics:
        states = await self._repo.list_states(owner_id)
        return self._aggregator.summarize(states, self._clock())

    async def recommendations(
        self, owner_id: str, summary: AggregateStatistics | None = None
    ) -> list[str]:
        """Study advice for the owner, built from `summary` when one is already at hand."""
        if summary is None:
            summary = await self.summarize(owner_id)
        return self._adapter.build_recommendations(summary)

    async def suggest_tier(
        self, owner_id: str, current_tier: DifficultyTier | str
    ) -> DifficultyTier:
        """
        Suggest the next tier from the owner's recent answers.

        Returns the current tier unchanged when there is no history.
        """
        history = await self._repo.recent_samples(owner_id, self._window)
        summary = summarize_performance(history)
        if summary.count == 0:
            return DifficultyTier.parse(current_tier)

        return self._adapter.suggest_next_tier(
            current_tier, summary.correct_rate, summary.average_confidence
        )

    async def build_session_queue(
        self,
        owner_id: str,
        limit: int | None = None,
        rng: random.Random | None = None,
    ) -> list[str]:
        """
        Build an ordered list of item ids for the next study session.

        Due items come first (most overdue first), followed by never-reviewed
        items in shuffled order.

        Args:
            owner_id: The learner.
            limit: Maximum number of item ids to return; the configured queue size if None.
            rng: Random source for shuffling new items.

        Returns:
            Item ids, at most `limit` long.
        """
        if limit is None:
            limit = self._max_queue_size
        if limit <= 0:
            return []

        states = await self._repo.list_states(owner_id)
        due = [
            s.item_id
            for s in self._aggregator.due_items(states, self._clock())
            if s.repetition_count > 0
        ]
        fresh = [s.item_id for s in states if s.repetition_count == 0]

        logger.debug("Queue for %s: %d due, %d new", owner_id, len(due), len(fresh))
        return (due + fisher_yates_shuffle(fresh, rng))[:limit]
