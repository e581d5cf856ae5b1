"""structlog setup shared by the client modules."""
import logging
import sys

import structlog

from mixpanel_events.config import settings


def configure_logging(level: str | None = None, json_output: bool | None = None) -> None:
    level_name = (level or settings.log_level).upper()
    as_json = settings.log_json if json_output is None else json_output
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level_name)
    renderer = (
        structlog.processors.JSONRenderer()
        if as_json
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level_name)
        ),
        cache_logger_on_first_use=True,
    )


def get_logger(**initial: object) -> structlog.typing.FilteringBoundLogger:
    return structlog.get_logger("mixpanel_events", **initial)
