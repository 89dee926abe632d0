"""Loguru sinks for the award graph pipeline.

Every record carries `stage` and `run_id` extras ("-" outside a pipeline
stage). Inside `log_with_context` they are filled in for plain `logger`
calls too, so module-level logging in extractors and loaders is attributed
to the stage that triggered it.
"""

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Any

from loguru import logger

from ..config.loader import get_config
from ..config.schemas import LoggingConfig


current_stage: ContextVar[str | None] = ContextVar("stage", default=None)
current_run_id: ContextVar[str | None] = ContextVar("run_id", default=None)

# (LoggingConfig switch, fragment); None means always shown
_TEXT_FIELDS: tuple[tuple[str | None, str], ...] = (
    ("include_timestamps", "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green>"),
    (None, "<level>{level: <8}</level>"),
    ("include_stage", "<cyan>{extra[stage]: <10}</cyan>"),
    ("include_run_id", "<magenta>{extra[run_id]: <12}</magenta>"),
    (None, "<level>{message}</level>"),
)


def text_format(settings: LoggingConfig) -> str:
    """Pipe-separated console format honoring the `include_*` switches."""
    return " | ".join(
        fragment for switch, fragment in _TEXT_FIELDS if switch is None or getattr(settings, switch)
    )


def _inject_context(record: dict[str, Any]) -> None:
    extra = record["extra"]
    for key, var in (("stage", current_stage), ("run_id", current_run_id)):
        value = var.get()
        # Explicitly bound values win
        if value is not None and extra.get(key, "-") == "-":
            extra[key] = value


def _known_level(name: str) -> bool:
    try:
        logger.level(name)
    except ValueError:
        return False
    return True


def setup_logging(settings: LoggingConfig | None = None, level: str | None = None) -> None:
    """Replace all loguru sinks with the console and optional rotating file sink.

    Args:
        settings: Logging section of the pipeline configuration
        level: Overrides `settings.level` (e.g. DEBUG for --verbose). Unknown
            level names fall back to INFO with a warning.
    """
    settings = settings or LoggingConfig()
    requested = (level or settings.level).upper()
    safe_level = requested if _known_level(requested) else "INFO"

    serialize = settings.format == "json"
    sink_options: dict[str, Any] = {
        "level": safe_level,
        "format": "{message}" if serialize else text_format(settings),
        "serialize": serialize,
    }

    logger.remove()
    logger.configure(extra={"stage": "-", "run_id": "-"}, patcher=_inject_context)
    logger.add(sys.stdout, colorize=not serialize, **sink_options)

    if settings.file_path:
        log_path = Path(settings.file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            rotation=f"{settings.max_file_size_mb} MB",
            retention=settings.backup_count,
            encoding="utf-8",
            **sink_options,
        )

    if safe_level != requested:
        logger.warning(f"Unknown log level {requested!r}; using INFO")


def configure_logging_from_config() -> None:
    setup_logging(get_config().logging)


@contextmanager
def log_with_context(stage: str | None = None, run_id: str | None = None) -> Iterator[Any]:
    """Attribute every log record in the block to `stage` and `run_id`.

    Yields a logger bound to the same values.
    """
    tokens = []
    extra = {}
    for var, key, value in ((current_stage, "stage", stage), (current_run_id, "run_id", run_id)):
        if value is not None:
            tokens.append((var, var.set(value)))
            extra[key] = value
    try:
        yield logger.bind(**extra) if extra else logger
    finally:
        for var, token in reversed(tokens):
            var.reset(token)
