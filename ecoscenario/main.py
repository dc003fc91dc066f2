"""FastAPI backend exposing EcoScenario metrics and scenario endpoints."""

from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from .config import ServiceSettings, load_settings
from .schemas import (
    FieldError,
    MessageResponse,
    ProcessParameters,
    Scenario,
    ScenarioCreate,
    ScenarioRecord,
    SustainabilityMetrics,
    ValidationErrorResponse,
)
from .services.metrics import MetricsCalculator
from .services.storage import InMemoryScenarioStore, ScenarioStore

logger = logging.getLogger(__name__)

INVALID_ID_MESSAGE = "Invalid scenario ID"
NOT_FOUND_MESSAGE = "Scenario not found"

VALIDATION_MESSAGES: dict[tuple[str, str], str] = {
    ("POST", "/api/calculate-metrics"): "Invalid parameters",
    ("POST", "/api/scenarios"): "Invalid scenario data",
}

ERROR_RESPONSES = {
    400: {"model": ValidationErrorResponse},
    404: {"model": MessageResponse},
    500: {"model": MessageResponse},
}


def get_store(request: Request) -> ScenarioStore:
    return request.app.state.store


def get_calculator(request: Request) -> MetricsCalculator:
    return request.app.state.calculator


def parse_scenario_id(raw_id: str) -> int:
    """Parse a path id; only plain positive integers are accepted."""
    if not (raw_id.isascii() and raw_id.isdigit()) or int(raw_id) < 1:
        raise HTTPException(status_code=400, detail=INVALID_ID_MESSAGE)
    return int(raw_id)


def _field_errors(exc: RequestValidationError) -> list[FieldError]:
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        errors.append(
            FieldError(
                field=".".join(location) or "body",
                message=error.get("msg", "Validation failed"),
            )
        )
    return errors


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = VALIDATION_MESSAGES.get((request.method, request.url.path), "Invalid request")
    body = ValidationErrorResponse(message=message, errors=_field_errors(exc))
    return JSONResponse(status_code=400, content=body.model_dump())


async def _http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


def health() -> dict[str, str]:
    """Service health endpoint."""
    return {"status": "ok"}


def list_scenarios(store: ScenarioStore = Depends(get_store)) -> list[Scenario]:
    """Return all scenarios, most recent first."""
    try:
        return store.list_all()
    except Exception:  # noqa: BLE001
        logger.exception("Listing scenarios failed")
        raise HTTPException(status_code=500, detail="Failed to fetch scenarios")


def get_scenario(scenario_id: str, store: ScenarioStore = Depends(get_store)) -> Scenario:
    """Return one scenario by id."""
    parsed_id = parse_scenario_id(scenario_id)
    try:
        scenario = store.get_by_id(parsed_id)
    except Exception:  # noqa: BLE001
        logger.exception("Fetching scenario %d failed", parsed_id)
        raise HTTPException(status_code=500, detail="Failed to fetch scenario")
    if scenario is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE)
    return scenario


def calculate_scenario_metrics(
    params: ProcessParameters,
    calculator: MetricsCalculator = Depends(get_calculator),
) -> SustainabilityMetrics:
    """Preview metrics for a set of process parameters without storing them."""
    try:
        return calculator.calculate(params)
    except Exception:  # noqa: BLE001
        logger.exception("Metrics calculation failed")
        raise HTTPException(status_code=500, detail="Failed to calculate metrics")


def create_scenario(
    payload: ScenarioCreate,
    store: ScenarioStore = Depends(get_store),
    calculator: MetricsCalculator = Depends(get_calculator),
) -> Scenario:
    """Compute metrics once for *payload* and store the resulting scenario."""
    try:
        metrics = calculator.calculate(payload)
        record = ScenarioRecord(**payload.model_dump(), **metrics.model_dump())
        return store.create(record)
    except Exception:  # noqa: BLE001
        logger.exception("Creating scenario '%s' failed", payload.name)
        raise HTTPException(status_code=500, detail="Failed to create scenario")


def delete_scenario(scenario_id: str, store: ScenarioStore = Depends(get_store)) -> MessageResponse:
    """Delete a scenario by id."""
    parsed_id = parse_scenario_id(scenario_id)
    try:
        deleted = store.delete_by_id(parsed_id)
    except Exception:  # noqa: BLE001
        logger.exception("Deleting scenario %d failed", parsed_id)
        raise HTTPException(status_code=500, detail="Failed to delete scenario")
    if not deleted:
        raise HTTPException(status_code=404, detail=NOT_FOUND_MESSAGE)
    return MessageResponse(message="Scenario deleted successfully")


def create_app(
    store: ScenarioStore | None = None,
    calculator: MetricsCalculator | None = None,
    settings: ServiceSettings | None = None,
) -> FastAPI:
    """Build the application around an explicitly owned store and calculator."""
    settings = settings or load_settings()
    app = FastAPI(title="EcoScenario API", version="0.1.0")
    app.state.settings = settings
    app.state.store = store if store is not None else InMemoryScenarioStore(seed=settings.seed_scenarios)
    app.state.calculator = calculator or MetricsCalculator()

    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(HTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    app.add_api_route("/health", health, methods=["GET"])
    app.add_api_route(
        "/api/scenarios",
        list_scenarios,
        methods=["GET"],
        response_model=list[Scenario],
        responses={500: ERROR_RESPONSES[500]},
    )
    app.add_api_route(
        "/api/scenarios/{scenario_id}",
        get_scenario,
        methods=["GET"],
        response_model=Scenario,
        responses=ERROR_RESPONSES,
    )
    app.add_api_route(
        "/api/calculate-metrics",
        calculate_scenario_metrics,
        methods=["POST"],
        response_model=SustainabilityMetrics,
        responses={400: ERROR_RESPONSES[400], 500: ERROR_RESPONSES[500]},
    )
    app.add_api_route(
        "/api/scenarios",
        create_scenario,
        methods=["POST"],
        response_model=Scenario,
        responses={400: ERROR_RESPONSES[400], 500: ERROR_RESPONSES[500]},
    )
    app.add_api_route(
        "/api/scenarios/{scenario_id}",
        delete_scenario,
        methods=["DELETE"],
        response_model=MessageResponse,
        responses=ERROR_RESPONSES,
    )

    logger.info("App ready with %s.", type(app.state.store).__name__)
    return app


# Built from defaults so importing this module never reads the environment.
# Env-configured serving: the ``ecoscenario`` CLI or
# ``uvicorn --factory ecoscenario.main:create_app``.
app = create_app(settings=ServiceSettings())
