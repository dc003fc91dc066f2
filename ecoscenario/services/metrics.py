"""Deterministic sustainability metrics model for production scenarios."""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..config import DEFAULT_CONFIG, MetricsConfig
from ..schemas import ProcessParameters, SustainabilityMetrics


def round_half_up(value: float, digits: int = 0) -> float:
    """Round to *digits* decimals with ties going up (not banker's rounding)."""
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


def clamp(value: float, lower: float = 0.0, upper: float = 100.0) -> float:
    return max(lower, min(upper, value))


@dataclass
class MetricsCalculator:
    """Pure calculator turning process parameters into sustainability metrics."""

    config: MetricsConfig = DEFAULT_CONFIG

    def carbon_footprint(self, energy_consumption: float, waste_generation: float) -> float:
        """Monthly tCO2 from energy use and waste, to one decimal place."""
        footprint = (
            energy_consumption * self.config.energy_emission_factor
            + waste_generation * self.config.waste_emission_factor
        )
        return round_half_up(footprint, 1)

    @staticmethod
    def efficiency(per_unit: float, baseline: float) -> float:
        """Score 0-100 where exactly *baseline* per unit scores 100.

        Every baseline's worth of consumption above it costs 100 points.
        Clamped before any rounding.
        """
        return clamp(100 - (per_unit - baseline) / baseline * 100)

    def calculate(self, params: ProcessParameters) -> SustainabilityMetrics:
        """Derive metrics from *params*.

        Raises:
            ZeroDivisionError: If ``production_volume`` is zero.
        """
        water_per_unit = params.water_usage / params.production_volume
        energy_per_unit = params.energy_consumption / params.production_volume

        water_efficiency = int(
            round_half_up(self.efficiency(water_per_unit, self.config.baseline_water_per_unit))
        )
        energy_efficiency = int(
            round_half_up(self.efficiency(energy_per_unit, self.config.baseline_energy_per_unit))
        )
        # Averaged from the already-rounded efficiencies.
        score = int(round_half_up((water_efficiency + energy_efficiency) / 2))

        return SustainabilityMetrics(
            carbon_footprint=self.carbon_footprint(params.energy_consumption, params.waste_generation),
            water_efficiency=water_efficiency,
            energy_efficiency=energy_efficiency,
            sustainability_score=score,
        )


def calculate_metrics(params: ProcessParameters) -> SustainabilityMetrics:
    """Calculate metrics with the default constants."""
    return MetricsCalculator().calculate(params)
