"""
In-Memory Review Repository — Infrastructure adapter backed by dictionaries.

Used by the server by default and throughout the test suite.
"""

from collections import defaultdict

from cadence.domain.review.models import PerformanceSample, ReviewState
from cadence.domain.review.ports import ReviewRepository


class InMemoryReviewRepository(ReviewRepository):
    """Keeps states and answer history for the lifetime of the process."""

    def __init__(self, states: list[ReviewState] | None = None):
        self._states: dict[str, dict[str, ReviewState]] = defaultdict(dict)
        self._history: dict[str, list[PerformanceSample]] = defaultdict(list)
        for state in states or []:
            self._states[state.owner_id][state.item_id] = state

    async def get_state(self, owner_id: str, item_id: str) -> ReviewState | None:
        return self._states.get(owner_id, {}).get(item_id)

    async def save_state(self, state: ReviewState) -> None:
        self._states[state.owner_id][state.item_id] = state

    async def list_states(self, owner_id: str) -> list[ReviewState]:
        return list(self._states.get(owner_id, {}).values())

    async def append_sample(
        self, owner_id: str, item_id: str, sample: PerformanceSample
    ) -> None:
        self._history[owner_id].append(sample)

    async def recent_samples(self, owner_id: str, limit: int) -> list[PerformanceSample]:
        if limit <= 0:
            return []
        return list(self._history.get(owner_id, [])[-limit:])
