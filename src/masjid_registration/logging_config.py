"""structlog setup for the registration client.

Console rendering while developing, one JSON object per line in
production. Personal identifiers are masked in every event before it is
rendered, since submission payloads are logged at DEBUG.
"""

import logging
import sys
from collections.abc import Mapping
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from masjid_registration.config import Settings, get_settings

# Wire and record keys whose values identify a person
MASKED_KEYS = frozenset(
    {
        "aadharNumber",
        "aadhar_number",
        "phoneNumber",
        "phone_number",
        "alternateNumber",
        "alternate_number",
    }
)


def mask_identifier(value: Any) -> Any:
    """Keep only the last four characters: ``"9876543210"`` -> ``"******3210"``."""
    if not isinstance(value, str) or not value:
        return value
    return "*" * max(len(value) - 4, 0) + value[-4:]


def _mask(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {
            key: mask_identifier(item) if key in MASKED_KEYS else _mask(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [_mask(item) for item in value]
    return value


def mask_personal_ids(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    return _mask(event_dict)


class _AppContext:
    """Stamps each JSON event with the application name, version and environment."""

    def __init__(self, settings: Settings) -> None:
        self._context = {
            "app": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment.value,
        }

    def __call__(
        self, logger: WrappedLogger, method_name: str, event_dict: EventDict
    ) -> EventDict:
        for key, value in self._context.items():
            event_dict.setdefault(key, value)
        return event_dict


def build_processors(settings: Settings) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        mask_personal_ids,
    ]
    if settings.log_format == "json":
        processors += [
            _AppContext(settings),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    return processors


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog once at startup.

    Events go to stderr through stdlib logging so ``payload`` output on
    stdout stays machine-readable.
    """
    if settings is None:
        settings = get_settings()
    level = getattr(logging, settings.log_level.value)

    structlog.configure(
        processors=build_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)

    if settings.log_file:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(settings.log_file, encoding="utf-8")
        handler.setLevel(level)
        logging.getLogger().addHandler(handler)

    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(max(level, logging.INFO))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.stdlib.get_logger(name)


class LogContext:
    """Bind key/values to every event logged inside the ``with`` block."""

    def __init__(self, **kwargs: Any) -> None:
        self.kwargs = kwargs

    def __enter__(self) -> "LogContext":
        structlog.contextvars.bind_contextvars(**self.kwargs)
        return self

    def __exit__(self, *args: Any) -> None:
        structlog.contextvars.unbind_contextvars(*self.kwargs.keys())
