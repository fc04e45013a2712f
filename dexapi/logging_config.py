"""structlog setup for the gateway process."""

import logging

import structlog


def configure_logging(level: str = "INFO", *, console: bool = False) -> None:
    """Configure structlog processors and the level filter.

    Args:
        level: Minimum level name to emit (e.g. "INFO", "DEBUG").
               Unknown names fall back to INFO.
        console: Render human-readable lines instead of JSON
    """
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if console:
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.extend([structlog.processors.format_exc_info, structlog.processors.JSONRenderer()])

    min_level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        cache_logger_on_first_use=True,
    )
