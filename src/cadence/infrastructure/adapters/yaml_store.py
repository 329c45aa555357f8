"""
YAML Review Repository — Infrastructure adapter for a single state file.

Layout of the document:

    owners:
      <owner_id>:
        states:
          <item_id>: {next_review_at: ..., interval_days: ..., ...}
        history:
          - {item_id: ..., was_correct: ..., confidence_percent: ..., ...}
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml  # type: ignore

from cadence.domain.errors import StoreError
from cadence.domain.review.models import PerformanceSample, ReviewState
from cadence.domain.review.ports import ReviewRepository

logger = logging.getLogger(__name__)

# Oldest answers are dropped beyond this many per owner
MAX_HISTORY = 500


class YamlReviewRepository(ReviewRepository):
    """
    Persists review states to a YAML file.

    The whole document is re-read on every call and rewritten atomically on
    every change, so several short-lived processes can share one file.
    """

    def __init__(self, path: Path, max_history: int = MAX_HISTORY):
        self.path = Path(path)
        self.max_history = max_history

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {"owners": {}}

        try:
            data = yaml.safe_load(self.path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise StoreError(f"Corrupt review store {self.path}: {e}") from e
        except OSError as e:
            raise StoreError(f"Cannot read review store {self.path}: {e}") from e

        if data is None:
            return {"owners": {}}
        if not isinstance(data, dict) or not isinstance(data.get("owners"), (dict, type(None))):
            raise StoreError(f"Unexpected layout in review store {self.path}")

        owners = data["owners"] = data.get("owners") or {}
        for owner_id, owner in owners.items():
            if owner is None:
                owners[owner_id] = owner = {}
            if (
                not isinstance(owner, dict)
                or not isinstance(owner.get("states"), (dict, type(None)))
                or not isinstance(owner.get("history"), (list, type(None)))
            ):
                raise StoreError(
                    f"Unexpected layout for owner {owner_id!r} in review store {self.path}"
                )
        return data

    def _dump(self, data: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".reviews-", suffix=".yaml")
        except OSError as e:
            raise StoreError(f"Cannot write review store {self.path}: {e}") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)
            os.replace(tmp, self.path)
        except (OSError, yaml.YAMLError) as e:
            Path(tmp).unlink(missing_ok=True)
            raise StoreError(f"Cannot write review store {self.path}: {e}") from e

    @staticmethod
    def _owner(data: dict[str, Any], owner_id: str) -> dict[str, Any]:
        owner = data["owners"].setdefault(owner_id, {})
        if owner.get("states") is None:
            owner["states"] = {}
        if owner.get("history") is None:
            owner["history"] = []
        return owner

    @staticmethod
    def _to_state(owner_id: str, item_id: str, raw: dict[str, Any]) -> ReviewState:
        try:
            return ReviewState.from_dict({**raw, "owner_id": owner_id, "item_id": item_id})
        except (KeyError, TypeError, ValueError) as e:
            raise StoreError(f"Malformed state for {owner_id}/{item_id}: {e}") from e

    async def get_state(self, owner_id: str, item_id: str) -> ReviewState | None:
        owner = self._load()["owners"].get(owner_id) or {}
        raw = (owner.get("states") or {}).get(item_id)
        if raw is None:
            return None
        return self._to_state(owner_id, item_id, raw)

    async def save_state(self, state: ReviewState) -> None:
        data = self._load()
        record = state.to_dict()
        del record["owner_id"], record["item_id"]
        self._owner(data, state.owner_id)["states"][state.item_id] = record
        self._dump(data)

    async def list_states(self, owner_id: str) -> list[ReviewState]:
        owner = self._load()["owners"].get(owner_id) or {}
        return [
            self._to_state(owner_id, str(item_id), raw)
            for item_id, raw in (owner.get("states") or {}).items()
        ]

    async def append_sample(
        self, owner_id: str, item_id: str, sample: PerformanceSample
    ) -> None:
        data = self._load()
        history = self._owner(data, owner_id)["history"]
        history.append({"item_id": item_id, **sample.to_dict()})
        if len(history) > self.max_history:
            logger.debug("Trimming history for %s to %d entries", owner_id, self.max_history)
            del history[: len(history) - self.max_history]
        self._dump(data)

    async def recent_samples(self, owner_id: str, limit: int) -> list[PerformanceSample]:
        if limit <= 0:
            return []
        owner = self._load()["owners"].get(owner_id) or {}
        samples = []
        for raw in (owner.get("history") or [])[-limit:]:
            try:
                samples.append(PerformanceSample.from_dict(raw))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed history entry for %s: %r", owner_id, raw)
        return samples
