"""Configuration for EcoScenario calculation constants and service settings."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

TRUTHY_VALUES = {"1", "true", "yes", "on"}
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@dataclass(frozen=True)
class MetricsConfig:
    """Emission factors and per-unit baselines for sustainability metrics."""

    energy_emission_factor: float = 0.0005  # tCO2 per kWh
    waste_emission_factor: float = 0.001  # tCO2 per kg
    baseline_water_per_unit: float = 2.5  # liters per unit
    baseline_energy_per_unit: float = 0.5  # kWh per unit


DEFAULT_CONFIG = MetricsConfig()


@dataclass(frozen=True)
class ServiceSettings:
    """Runtime settings for the HTTP service."""

    host: str = "127.0.0.1"
    port: int = 5000
    log_level: str = "INFO"
    seed_scenarios: bool = True


def parse_port(value: str, source: str = "ECOSCENARIO_PORT") -> int:
    """Parse a TCP port; *source* names the setting in error messages."""
    try:
        port = int(value)
    except ValueError:
        raise ValueError(f"{source} must be an integer, got '{value}'") from None
    if not 0 < port < 65536:
        raise ValueError(f"{source} out of range: {port}")
    return port


def parse_log_level(value: str) -> str:
    level = value.strip().upper()
    if level not in LOG_LEVELS:
        raise ValueError(
            f"ECOSCENARIO_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got '{value}'"
        )
    return level


def load_settings() -> ServiceSettings:
    """Load service settings from the environment (and a ``.env`` file if present).

    Raises:
        ValueError: If ``ECOSCENARIO_PORT`` is not a valid TCP port or
            ``ECOSCENARIO_LOG_LEVEL`` is not a known level.
    """
    load_dotenv()
    defaults = ServiceSettings()
    port_value = os.getenv("ECOSCENARIO_PORT")
    seed_value = os.getenv("ECOSCENARIO_SEED")
    return ServiceSettings(
        host=os.getenv("ECOSCENARIO_HOST", defaults.host),
        port=parse_port(port_value) if port_value else defaults.port,
        log_level=parse_log_level(os.getenv("ECOSCENARIO_LOG_LEVEL", defaults.log_level)),
        seed_scenarios=(
            seed_value.strip().lower() in TRUTHY_VALUES
            if seed_value is not None
            else defaults.seed_scenarios
        ),
    )
