from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from src.kanban.client.storage import LocalStorage
from src.kanban.domain.models import Task

logger = logging.getLogger(__name__)

CACHE_KEY = "tasks_cache"
CACHE_TIMESTAMP_KEY = "tasks_cache_timestamp"
DEFAULT_TTL_SECONDS = 5 * 60

_tasks_adapter = TypeAdapter(list[Task])


class TaskCache:
    """Time-boxed snapshot of the task list, replaced wholesale on every ``set``."""

    def __init__(
        self,
        storage: LocalStorage,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._storage = storage
        self._ttl_seconds = ttl_seconds
        self._clock = clock

    def get(self) -> list[Task] | None:
        """Return the snapshot, or None when missing or older than the TTL."""
        raw_timestamp = self._storage.get_item(CACHE_TIMESTAMP_KEY)
        try:
            captured_at = float(raw_timestamp) if raw_timestamp is not None else None
        except ValueError:
            captured_at = None
        if captured_at is None or self._clock() - captured_at > self._ttl_seconds:
            self.clear()
            return None

        data = self._storage.get_item(CACHE_KEY)
        if data is None:
            return None
        try:
            return _tasks_adapter.validate_python(json.loads(data))
        except (json.JSONDecodeError, PydanticValidationError):
            logger.warning("Discarding corrupt task cache")
            self.clear()
            return None

    def set(self, tasks: list[Task]) -> None:
        self._storage.set_item(
            CACHE_KEY, _tasks_adapter.dump_json(tasks).decode("utf-8")
        )
        self._storage.set_item(CACHE_TIMESTAMP_KEY, repr(self._clock()))

    def clear(self) -> None:
        self._storage.remove_item(CACHE_KEY)
        self._storage.remove_item(CACHE_TIMESTAMP_KEY)
