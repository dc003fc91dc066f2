"""Tests for ecoscenario.services.storage — in-memory scenario store."""

from __future__ import annotations

import threading
from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from ecoscenario.schemas import ScenarioRecord
from ecoscenario.services.storage import (
    SEED_SCENARIOS,
    InMemoryScenarioStore,
    ScenarioStore,
)

T0 = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


class _StepClock:
    """Clock advancing one minute per call."""

    def __init__(self, start: datetime = T0) -> None:
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current += timedelta(minutes=1)
        return now


def _record(name: str = "Linha 2", energy: float = 4000) -> ScenarioRecord:
    return ScenarioRecord(
        name=name,
        energy_consumption=energy,
        waste_generation=900,
        water_usage=20000,
        raw_materials=7000,
        production_volume=10000,
        carbon_footprint=2.9,
        water_efficiency=100,
        energy_efficiency=100,
        sustainability_score=100,
    )


@pytest.fixture
def store() -> InMemoryScenarioStore:
    return InMemoryScenarioStore(clock=_StepClock())


class TestSeeding:
    def test_seeds_three_scenarios_with_sequential_ids(self, store):
        assert len(store) == 3
        assert [store.get_by_id(i).name for i in (1, 2, 3)] == [
            "Cenário Atual",
            "Cenário Otimizado",
            "Cenário Verde",
        ]

    def test_seed_metrics_are_kept_verbatim(self, store):
        current = store.get_by_id(1)
        assert current.carbon_footprint == 2.8
        assert current.water_efficiency == 72
        assert current.energy_efficiency == 85
        assert current.sustainability_score == 76

        optimized = store.get_by_id(2)
        assert optimized.energy_consumption == 3500
        assert optimized.carbon_footprint == 2.0
        assert optimized.water_efficiency == 85
        assert optimized.energy_efficiency == 92
        assert optimized.sustainability_score == 89

        green = store.get_by_id(3)
        assert (green.carbon_footprint, green.sustainability_score) == (1.4, 94)

    def test_seeds_share_one_timestamp(self, store):
        assert {s.created_at for s in store.list_all()} == {T0}

    def test_no_seed(self):
        empty = InMemoryScenarioStore(seed=False)
        assert len(empty) == 0
        assert empty.list_all() == []

    def test_initialize_continues_counter(self):
        store = InMemoryScenarioStore(seed=False)
        store.create(_record())
        store.initialize()
        assert len(store) == 1 + len(SEED_SCENARIOS)
        assert store.get_by_id(2).name == "Cenário Atual"


class TestCreate:
    def test_assigns_next_id_and_timestamp(self, store):
        scenario = store.create(_record())
        assert scenario.id == 4
        assert scenario.created_at == T0 + timedelta(minutes=1)
        assert scenario.name == "Linha 2"
        assert store.get_by_id(4) == scenario

    def test_ids_strictly_increase(self, store):
        ids = [store.create(_record(name=f"s{i}")).id for i in range(5)]
        assert ids == sorted(set(ids))
        assert ids[0] == 4

    def test_ids_never_reused_after_delete(self, store):
        first = store.create(_record())
        assert store.delete_by_id(first.id)
        second = store.create(_record())
        assert second.id == first.id + 1

    def test_concurrent_creates_get_unique_increasing_ids(self, store):
        per_thread: dict[int, list[int]] = {}
        barrier = threading.Barrier(8)

        def worker(index: int) -> None:
            barrier.wait()
            per_thread[index] = [store.create(_record(name=f"t{index}-{i}")).id for i in range(25)]

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        all_ids = [scenario_id for ids in per_thread.values() for scenario_id in ids]
        assert sorted(all_ids) == list(range(4, 4 + 8 * 25))
        for ids in per_thread.values():
            assert ids == sorted(ids)
            assert len(set(ids)) == len(ids)
        assert len(store) == 3 + 8 * 25

    def test_created_scenario_is_frozen(self, store):
        scenario = store.create(_record())
        with pytest.raises(ValidationError):
            scenario.sustainability_score = 1

    def test_accepts_any_store_contract(self, store):
        assert isinstance(store, ScenarioStore)


class TestGetAndList:
    def test_get_missing_returns_none(self, store):
        assert store.get_by_id(999) is None

    def test_list_is_newest_first(self, store):
        a = store.create(_record(name="a"))
        b = store.create(_record(name="b"))
        listed = store.list_all()
        assert [s.id for s in listed[:2]] == [b.id, a.id]
        timestamps = [s.created_at for s in listed]
        assert timestamps == sorted(timestamps, reverse=True)

    def test_equal_timestamps_keep_insertion_order(self, store):
        assert [s.id for s in store.list_all()] == [1, 2, 3]


class TestDelete:
    def test_delete_existing(self, store):
        assert store.delete_by_id(2) is True
        assert store.get_by_id(2) is None
        assert 2 not in [s.id for s in store.list_all()]

    def test_delete_twice_reports_false(self, store):
        assert store.delete_by_id(1) is True
        assert store.delete_by_id(1) is False

    def test_delete_missing_changes_nothing(self, store):
        before = store.list_all()
        assert store.delete_by_id(42) is False
        assert store.list_all() == before
