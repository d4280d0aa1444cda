"""Command-line interface for quickstartgen."""

from __future__ import annotations

import argparse
import logging
import sys

from .config import AppConfig
from .errors import QuickstartError
from .pipeline import run
from .presenter import present_error

LOGGER = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def build_parser() -> argparse.ArgumentParser:
    return argparse.ArgumentParser(
        prog="quickstartgen",
        description=(
            "Quickstart guide generator. Reads .env in the current directory; "
            "all options are set through environment variables."
        ),
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, stream=sys.stderr, format=LOG_FORMAT)


def main(argv: list[str] | None = None) -> int:
    build_parser().parse_args(argv)
    try:
        config = AppConfig.load()
    except QuickstartError as exc:
        present_error(exc)
        return exc.exit_code

    configure_logging(config.log_level)
    LOGGER.debug(
        "config_loaded",
        extra={
            "model": config.model,
            "enable_openai": config.enable_openai,
            "working_directory": config.working_directory,
        },
    )
    return run(config)


if __name__ == "__main__":
    raise SystemExit(main())
