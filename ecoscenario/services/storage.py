"""Scenario storage contract and the default in-memory implementation."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Callable

from ..schemas import Scenario, ScenarioRecord

logger = logging.getLogger(__name__)

# Literal demo records. Their metrics are kept verbatim and are not all
# reproducible from the calculator.
SEED_SCENARIOS: tuple[ScenarioRecord, ...] = (
    ScenarioRecord(
        name="Cenário Atual",
        energy_consumption=5000,
        waste_generation=1200,
        water_usage=25000,
        raw_materials=8000,
        production_volume=10000,
        carbon_footprint=2.8,
        water_efficiency=72,
        energy_efficiency=85,
        sustainability_score=76,
    ),
    ScenarioRecord(
        name="Cenário Otimizado",
        energy_consumption=3500,
        waste_generation=800,
        water_usage=18000,
        raw_materials=7500,
        production_volume=10000,
        carbon_footprint=2.0,
        water_efficiency=85,
        energy_efficiency=92,
        sustainability_score=89,
    ),
    ScenarioRecord(
        name="Cenário Verde",
        energy_consumption=2500,
        waste_generation=600,
        water_usage=15000,
        raw_materials=7000,
        production_volume=10000,
        carbon_footprint=1.4,
        water_efficiency=92,
        energy_efficiency=96,
        sustainability_score=94,
    ),
)


def utc_now() -> datetime:
    return datetime.now(UTC)


class ScenarioStore(ABC):
    """Capability set every scenario backend must provide."""

    @abstractmethod
    def get_by_id(self, scenario_id: int) -> Scenario | None:
        """Return the scenario with *scenario_id*, or ``None`` if absent."""

    @abstractmethod
    def list_all(self) -> list[Scenario]:
        """Return every scenario, most recently created first."""

    @abstractmethod
    def create(self, record: ScenarioRecord) -> Scenario:
        """Assign an id and creation time to *record* and store it."""

    @abstractmethod
    def delete_by_id(self, scenario_id: int) -> bool:
        """Remove a scenario; return whether one was removed."""


class InMemoryScenarioStore(ScenarioStore):
    """Dict-backed store with a monotonic id counter.

    All operations share one lock since FastAPI runs sync handlers in a
    thread pool.

    Args:
        seed: Populate the demo scenarios on construction.
        clock: Source of ``created_at`` timestamps.
    """

    def __init__(self, seed: bool = True, clock: Callable[[], datetime] = utc_now) -> None:
        self._scenarios: dict[int, Scenario] = {}
        self._next_id = 1
        self._clock = clock
        self._lock = threading.Lock()
        if seed:
            self.initialize()

    def __len__(self) -> int:
        with self._lock:
            return len(self._scenarios)

    def _insert(self, record: ScenarioRecord, created_at: datetime) -> Scenario:
        scenario = Scenario(**record.model_dump(), id=self._next_id, created_at=created_at)
        self._scenarios[scenario.id] = scenario
        self._next_id += 1
        return scenario

    def initialize(self) -> None:
        """Insert the seed scenarios, all stamped with the same creation time."""
        with self._lock:
            created_at = self._clock()
            for record in SEED_SCENARIOS:
                self._insert(record, created_at)
        logger.info("Seeded %d scenarios.", len(SEED_SCENARIOS))

    def get_by_id(self, scenario_id: int) -> Scenario | None:
        with self._lock:
            return self._scenarios.get(scenario_id)

    def list_all(self) -> list[Scenario]:
        with self._lock:
            scenarios = list(self._scenarios.values())
        return sorted(scenarios, key=lambda scenario: scenario.created_at, reverse=True)

    def create(self, record: ScenarioRecord) -> Scenario:
        with self._lock:
            scenario = self._insert(record, self._clock())
        logger.info("Created scenario %d (%s).", scenario.id, scenario.name)
        return scenario

    def delete_by_id(self, scenario_id: int) -> bool:
        with self._lock:
            removed = self._scenarios.pop(scenario_id, None)
        if removed is None:
            logger.debug("Delete requested for unknown scenario %d.", scenario_id)
            return False
        logger.info("Deleted scenario %d.", scenario_id)
        return True
