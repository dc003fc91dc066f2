"""Service CLI entrypoint."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace

import uvicorn

from .config import LOG_LEVELS, ServiceSettings, load_settings, parse_port
from .main import create_app

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Configure console logging for the service."""
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )


def _port_arg(value: str) -> int:
    try:
        return parse_port(value, source="--port")
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ecoscenario", description="Sustainability scenario API.")
    p.add_argument("--host", default=None, help="Bind address. Env: ECOSCENARIO_HOST")
    p.add_argument("--port", type=_port_arg, default=None, help="Bind port. Env: ECOSCENARIO_PORT")
    p.add_argument("--log-level", choices=LOG_LEVELS, default=None,
                   help="Logging level. Env: ECOSCENARIO_LOG_LEVEL")
    p.add_argument("--no-seed", action="store_true",
                   help="Start with an empty store. Env: ECOSCENARIO_SEED=false")
    return p


def resolve_settings(args: argparse.Namespace, settings: ServiceSettings) -> ServiceSettings:
    """Apply CLI overrides on top of environment settings."""
    overrides: dict[str, object] = {}
    if args.host:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.no_seed:
        overrides["seed_scenarios"] = False
    return replace(settings, **overrides)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI args and serve the API with uvicorn."""
    args = _build_parser().parse_args(argv)
    try:
        settings = resolve_settings(args, load_settings())
    except ValueError as exc:
        logging.basicConfig(level=logging.ERROR)
        logger.error("Invalid configuration: %s", exc)
        sys.exit(1)

    configure_logging(settings.log_level)
    logger.info("Serving on %s:%d (seed=%s)", settings.host, settings.port, settings.seed_scenarios)
    uvicorn.run(
        create_app(settings=settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
