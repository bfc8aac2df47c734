from __future__ import annotations

import json
import logging
from collections import Counter
from typing import Any, Callable, Hashable, TypeVar

from pydantic import BaseModel

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def config_snapshot(model: BaseModel, *fields: str) -> str:
    """Stable text snapshot of selected model fields, usable as a cache key part."""
    payload = model.model_dump(mode="json", include=set(fields) if fields else None)
    return json.dumps(payload, sort_keys=True)


class StageCache:
    """Keeps the last value of each named stage together with the key it was computed for.

    A stage is recomputed only when its key differs from the stored one; values
    are replaced whole, never patched.
    """

    def __init__(self) -> None:
        self._entries: dict[str, tuple[Hashable, Any]] = {}
        self.computations: Counter[str] = Counter()

    def get(self, stage: str, key: Hashable, compute: Callable[[], T]) -> T:
        entry = self._entries.get(stage)
        if entry is not None and entry[0] == key:
            return entry[1]
        LOGGER.debug("Recomputing stage %s", stage)
        value = compute()
        self._entries[stage] = (key, value)
        self.computations[stage] += 1
        return value

    def clear(self) -> None:
        self._entries.clear()
