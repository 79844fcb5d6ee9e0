"""Structlog configuration for package-wide logging."""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog

from codeshot.settings import Settings, get_settings

if TYPE_CHECKING:
    from collections.abc import Iterator

    from structlog.typing import EventDict

_LOGGING_CONFIGURED = False


def _flatten_extra(
    logger: logging.Logger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Merge the stdlib-style `extra` mapping into the event payload.

    Call sites log with `logger.info("...", extra={...})`; flattening keeps the
    rendered record one level deep so JSON consumers can filter on the keys.

    Args:
        logger: The logger instance (unused).
        method_name: The logging method name (unused).
        event_dict: The original event dictionary.

    Returns:
        The event dictionary with `extra` keys promoted to the top level.
    """
    extra = event_dict.pop("extra", None)
    if isinstance(extra, dict):
        for key, value in extra.items():
            event_dict.setdefault(key, value)
    return event_dict


def _rename_event_key(
    logger: logging.Logger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Rename the structlog `event` key to `message`."""
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


def configure_logging(*, settings: Settings | None = None, force: bool = False) -> None:
    """Configure structlog and stdlib logging once for the package.

    Args:
        settings: Optional settings; the cached settings are used when omitted.
        force: Reconfigure even when logging was already configured.
    """
    global _LOGGING_CONFIGURED  # noqa: PLW0603

    if _LOGGING_CONFIGURED and not force:
        return

    config = settings or get_settings()
    log_level = getattr(logging, config.log_level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file, encoding="utf-8"))

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=handlers,
        force=force,
    )

    renderer: Any = structlog.dev.ConsoleRenderer()
    if config.log_json:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            _flatten_extra,
            _rename_event_key,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _LOGGING_CONFIGURED = True


@contextmanager
def bound_action(action: str, **values: object) -> Iterator[None]:
    """Bind screenshot action context (`copy`, `save`, ...) to every log line emitted inside.

    Args:
        action: Name of the user-facing action.
        **values: Additional context values.

    Yields:
        None: Control back to the caller while the context is bound.
    """
    with structlog.contextvars.bound_contextvars(action=action, **values):
        yield


def get_logger(name: str = "codeshot") -> structlog.BoundLogger:
    """Return package logger, configuring logging lazily."""
    if not _LOGGING_CONFIGURED:
        configure_logging()
    return structlog.get_logger(name)
