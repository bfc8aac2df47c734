from __future__ import annotations

from stacked_charts.config import ChartConfig
from stacked_charts.pipeline.memo import StageCache, config_snapshot


def test_stage_cache_recomputes_only_on_new_key() -> None:
    cache = StageCache()
    calls: list[int] = []

    def _compute() -> int:
        calls.append(1)
        return len(calls)

    assert cache.get("stage", ("v", 1), _compute) == 1
    assert cache.get("stage", ("v", 1), _compute) == 1
    assert cache.get("stage", ("v", 2), _compute) == 2
    assert cache.computations["stage"] == 2


def test_stage_cache_clear_forgets_entries_but_keeps_counts() -> None:
    cache = StageCache()
    cache.get("stage", "key", lambda: "old")

    cache.clear()

    assert cache.get("stage", "key", lambda: "new") == "new"
    assert cache.computations["stage"] == 2


def test_config_snapshot_reads_only_named_fields() -> None:
    base = ChartConfig(selected_entity_names=["A"])
    relative = base.model_copy(update={"is_relative_mode": True})

    assert config_snapshot(base, "selected_entity_names") == config_snapshot(
        relative, "selected_entity_names"
    )
    assert config_snapshot(base, "is_relative_mode") != config_snapshot(
        relative, "is_relative_mode"
    )
