"""Pydantic request/response schemas for EcoScenario endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProcessParameters(CamelModel):
    """One month of production process inputs."""

    energy_consumption: float = Field(..., ge=0.0, allow_inf_nan=False, examples=[5000])
    waste_generation: float = Field(..., ge=0.0, allow_inf_nan=False, examples=[1200])
    water_usage: float = Field(..., ge=0.0, allow_inf_nan=False, examples=[25000])
    raw_materials: float = Field(..., ge=0.0, allow_inf_nan=False, examples=[8000])
    production_volume: float = Field(..., gt=0.0, allow_inf_nan=False, examples=[10000])


class ScenarioCreate(ProcessParameters):
    """Scenario creation payload: a name plus process parameters."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, examples=["Cenário Atual"])


class SustainabilityMetrics(CamelModel):
    """Metrics derived from process parameters."""

    carbon_footprint: float = Field(..., ge=0.0)
    water_efficiency: int = Field(..., ge=0, le=100)
    energy_efficiency: int = Field(..., ge=0, le=100)
    sustainability_score: int = Field(..., ge=0, le=100)


class ScenarioRecord(ScenarioCreate, SustainabilityMetrics):
    """Scenario payload with metrics attached, ready to be stored."""


class Scenario(ScenarioRecord):
    """Stored scenario; immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1)
    created_at: datetime


class MessageResponse(BaseModel):
    """Plain message body used for confirmations and errors."""

    message: str


class FieldError(BaseModel):
    """One field violation reported on a 400 response."""

    field: str
    message: str


class ValidationErrorResponse(MessageResponse):
    """Validation failure body with per-field violations."""

    errors: list[FieldError] = Field(default_factory=list)
