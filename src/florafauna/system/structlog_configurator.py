"""Structlog-based logging configuration for the Flora & Fauna library.

Library modules log through the standard ``logging`` module with
%-style arguments. ``configure_structlog`` routes those records through
a structlog processor chain so the CLI and the web service emit the
same fields. Output is human-readable on a terminal and JSON otherwise
(piped CLI runs, service managers, containers).
"""

import logging
import os
import sys
from typing import Any

import structlog

from florafauna.config.models import LibraryConfig, LoggingConfig

CALLSITE_PARAMETERS = [
    structlog.processors.CallsiteParameter.MODULE,
    structlog.processors.CallsiteParameter.FUNC_NAME,
    structlog.processors.CallsiteParameter.LINENO,
]

# Third-party loggers that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")


def _static_fields(extra_fields: dict[str, str]) -> structlog.types.Processor:
    """Return a processor stamping fixed fields onto every event."""

    def processor(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.update(extra_fields)
        return event_dict

    return processor


def _use_json(config: LoggingConfig) -> bool:
    """Decide the output format.

    Explicit configuration wins, then FLORAFAUNA_JSON_LOGS, then whether
    stderr is attached to a terminal.
    """
    if config.json_logs is not None:
        return config.json_logs
    env_value = os.environ.get("FLORAFAUNA_JSON_LOGS")
    if env_value:
        return env_value.lower() in ("1", "true", "yes")
    return not sys.stderr.isatty()


def _shared_processors(config: LoggingConfig) -> list[structlog.types.Processor]:
    """Build the processor chain applied to structlog and stdlib records alike."""
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _static_fields({"service": "florafauna", **config.extra_fields}),
    ]
    if config.include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(CALLSITE_PARAMETERS))
    return processors


def _renderer(config: LoggingConfig) -> structlog.types.Processor:
    if _use_json(config):
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def _install_handler(config: LoggingConfig, shared: list[structlog.types.Processor]) -> None:
    """Replace root handlers with one stderr handler using structlog formatting."""
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    # stderr keeps stdout free for CLI progress output
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(config),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers[:] = [handler]
    root_logger.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def configure_structlog(config: LibraryConfig) -> None:
    """Configure structlog and stdlib logging from the library configuration.

    Safe to call more than once; each call replaces the root handlers.

    Args:
        config: The LibraryConfig whose ``logging`` section is applied.
    """
    shared = _shared_processors(config.logging)

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    _install_handler(config.logging, shared)

    logging.getLogger(__name__).debug(
        "Logging configured (level=%s, json=%s)", config.logging.level, _use_json(config.logging)
    )
