"""
Ports (interfaces) for review state storage.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import PerformanceSample, ReviewState


class ReviewRepository(ABC):
    """
    Port for persisting review states and the answer history behind them.

    Implementations:
        - InMemoryReviewRepository: Process-local dictionaries.
        - YamlReviewRepository: A single YAML document on disk.
    """

    @abstractmethod
    async def get_state(self, owner_id: str, item_id: str) -> ReviewState | None:
        """
        Fetch the schedule for one (owner, item) pair.

        Returns:
            The stored ReviewState, or None if the item was never reviewed.
        """
        pass

    @abstractmethod
    async def save_state(self, state: ReviewState) -> None:
        """Insert or replace the state keyed by (state.owner_id, state.item_id)."""
        pass

    @abstractmethod
    async def list_states(self, owner_id: str) -> list[ReviewState]:
        """
        Fetch every state belonging to an owner.

        Returns:
            List of ReviewState objects in insertion order.
        """
        pass

    @abstractmethod
    async def append_sample(
        self, owner_id: str, item_id: str, sample: PerformanceSample
    ) -> None:
        """Record an answer in the owner's history."""
        pass

    @abstractmethod
    async def recent_samples(self, owner_id: str, limit: int) -> list[PerformanceSample]:
        """
        Fetch the owner's most recent answers.

        Returns:
            Up to `limit` samples, oldest first.
        """
        pass
