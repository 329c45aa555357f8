import pytest

from cadence.domain.review.models import PerformanceSample
from cadence.infrastructure.adapters.memory_store import InMemoryReviewRepository


@pytest.mark.asyncio
async def test_states_are_scoped_by_owner(make_state):
    repo = InMemoryReviewRepository([make_state(owner_id="alice"), make_state(owner_id="bob")])

    await repo.save_state(make_state(owner_id="alice", item_id="item-2"))

    assert [s.item_id for s in await repo.list_states("alice")] == ["item-1", "item-2"]
    assert len(await repo.list_states("bob")) == 1
    assert await repo.list_states("carol") == []
    assert await repo.get_state("carol", "item-1") is None


@pytest.mark.asyncio
async def test_save_replaces_existing(make_state):
    repo = InMemoryReviewRepository([make_state(interval_days=1)])
    await repo.save_state(make_state(interval_days=9))

    assert (await repo.get_state("alice", "item-1")).interval_days == 9
    assert len(await repo.list_states("alice")) == 1


@pytest.mark.asyncio
async def test_recent_samples_newest_last():
    repo = InMemoryReviewRepository()
    for confidence in (10, 20, 30, 40):
        await repo.append_sample("alice", "x", PerformanceSample(True, confidence, 1.0))

    recent = await repo.recent_samples("alice", 2)

    assert [s.confidence_percent for s in recent] == [30, 40]
    assert await repo.recent_samples("alice", 0) == []
    assert await repo.recent_samples("bob", 5) == []
