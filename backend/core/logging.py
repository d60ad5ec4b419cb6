"""structlog setup for the gateway.

LOG_FORMAT selects ``json`` (log shippers) or ``console`` (default, human
readable). LOG_LEVEL takes a stdlib level name and defaults to INFO.

Every event passes through ``redact_sensitive_fields`` before it is rendered,
so credential values never reach a handler even when a caller logs a form.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import MutableMapping
    from typing import Any

    from structlog.typing import Processor

LOG_FILE_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"
REDACTED = "***"

_SENSITIVE_KEYS = frozenset({"password", "confirm_password", "confirmPassword", "password_hash", "session_id"})
_LOG_FORMATS = ("json", "console", "")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def redact_sensitive_fields(
    _logger: object,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Mask password and session values, one level deep."""
    for key, value in event_dict.items():
        if key in _SENSITIVE_KEYS:
            event_dict[key] = REDACTED
        elif isinstance(value, dict):
            event_dict[key] = {k: REDACTED if k in _SENSITIVE_KEYS else v for k, v in value.items()}
    return event_dict


def configure_structlog() -> None:
    """Point structlog at stdlib logging with the gateway processor chain.

    Exception formatting is left to the handler formatters so a traceback
    is rendered once per handler.
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_sensitive_fields,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]
    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def _is_test() -> bool:
    return "pytest" in sys.modules


def _env_choice(name: str, default: str, choices: tuple[str, ...]) -> str:
    value = os.environ.get(name, default)
    normalized = value.upper() if name == "LOG_LEVEL" else value.lower()
    if normalized not in choices:
        allowed = ", ".join(c for c in choices if c) or "unset"
        msg = f"Invalid {name}={value!r}. Must be one of: {allowed}."
        raise ValueError(msg)
    return normalized


def _formatter(*, json_mode: bool, colors: bool) -> logging.Formatter:
    if json_mode:
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors)
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )


def _open_log_file(log_dir: Path | str, *, json_mode: bool) -> tuple[logging.Handler, Path]:
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{datetime.now(tz=UTC).strftime(LOG_FILE_TIMESTAMP_FORMAT)}.log"
    handler = logging.FileHandler(path)
    handler.setFormatter(_formatter(json_mode=json_mode, colors=False))
    return handler, path


def setup_logging(log_dir: Path | str | None = None, level: int | None = None) -> Path | None:
    """Configure structlog and the root logger.

    Logs always go to stdout. Outside of pytest, passing ``log_dir`` also
    writes to a file named after the start time; its path is returned.
    """
    json_mode = _env_choice("LOG_FORMAT", "", _LOG_FORMATS) == "json"
    if level is None:
        level = getattr(logging, _env_choice("LOG_LEVEL", "INFO", _LOG_LEVELS))

    configure_structlog()

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    # Auth events already describe each request.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    stdout = logging.StreamHandler(sys.stdout)
    stdout.setFormatter(_formatter(json_mode=json_mode, colors=sys.stdout.isatty()))
    root.addHandler(stdout)

    if log_dir is None or _is_test():
        return None
    file_handler, path = _open_log_file(log_dir, json_mode=json_mode)
    root.addHandler(file_handler)
    return path
