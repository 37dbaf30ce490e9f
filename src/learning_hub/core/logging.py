"""Logging helpers shared across learninghub commands.

Commands log to ``<workspace>/logs/<name>.log`` as JSON lines, one object per
record. Quiz events carry an ``event`` name (``quiz_start``,
``quiz_answer`` ...), which is lifted to the top level of each line so the
log can be filtered with ``jq 'select(.event == "quiz_answer")'``.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import sys
import tempfile
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Mapping

__all__ = [
    "JsonLogFormatter",
    "configure_logger",
    "release_logger",
]

_FILE_MARKER = "_learning_hub_file"
_CONSOLE_MARKER = "_learning_hub_console"
_FALLBACK_DIRNAME = "learninghub-logs"


class JsonLogFormatter(logging.Formatter):
    """Render a record as a single JSON object."""

    # Attributes every LogRecord carries; anything else came from ``extra``.
    _RESERVED = frozenset(
        logging.LogRecord(
            "", logging.INFO, "", 0, "", None, None
        ).__dict__.keys()
    ) | {"message", "asctime", "taskName"}

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        extras = {
            key: _coerce_value(value)
            for key, value in vars(record).items()
            if key not in self._RESERVED
        }
        when = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: dict[str, Any] = {
            "timestamp": when.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": extras.pop("event", None),
            "message": record.getMessage(),
        }
        if payload["event"] is None:
            del payload["event"]
        if extras:
            payload["extra"] = extras
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = record.stack_info
        return json.dumps(payload, ensure_ascii=True)


def configure_logger(
    name: str,
    *,
    log_dir: Path,
    level: str = "INFO",
    verbose: bool = False,
    max_bytes: int = 2 * 1024 * 1024,
    backup_count: int = 3,
    filename: str | None = None,
) -> tuple[logging.Logger, Path]:
    """Attach a JSON file handler (and optionally stderr) to ``name``.

    Safe to call repeatedly: the managed file handler is reused while the
    target path stays the same, and the stderr handler follows ``verbose``.
    The returned path is where records actually land, which is a temp
    directory when ``log_dir`` cannot be written.
    """

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    log_name = filename or name.rpartition(".")[2] + ".log"
    handler, active_path = _ensure_file_handler(
        logger,
        _writable_log_path(log_dir, log_name),
        max_bytes=max_bytes,
        backup_count=backup_count,
    )
    handler.setLevel(logging.DEBUG if verbose else _coerce_level(level))
    _sync_console_handler(logger, enabled=verbose)
    return logger, active_path


def release_logger(logger: logging.Logger) -> None:
    """Close and detach every handler attached to ``logger``.

    Records propagate to the root logger again afterwards.
    """

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def _coerce_level(level: str) -> int:
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _managed(logger: logging.Logger, marker: str) -> list[logging.Handler]:
    return [h for h in logger.handlers if getattr(h, marker, False)]


def _open_handler(
    path: Path, *, max_bytes: int, backup_count: int
) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(JsonLogFormatter())
    setattr(handler, _FILE_MARKER, True)
    return handler


def _ensure_file_handler(
    logger: logging.Logger,
    path: Path,
    *,
    max_bytes: int,
    backup_count: int,
) -> tuple[RotatingFileHandler, Path]:
    for existing in _managed(logger, _FILE_MARKER):
        if Path(existing.baseFilename) == path:  # type: ignore[attr-defined]
            return existing, path  # type: ignore[return-value]
        logger.removeHandler(existing)
        existing.close()

    try:
        handler = _open_handler(
            path, max_bytes=max_bytes, backup_count=backup_count
        )
    except PermissionError:
        path = _writable_log_path(_fallback_log_dir(), path.name)
        handler = _open_handler(
            path, max_bytes=max_bytes, backup_count=backup_count
        )
    logger.addHandler(handler)
    return handler, path


def _sync_console_handler(logger: logging.Logger, *, enabled: bool) -> None:
    existing = _managed(logger, _CONSOLE_MARKER)
    if not enabled:
        for handler in existing:
            logger.removeHandler(handler)
            handler.close()
        return
    if existing:
        return
    console = logging.StreamHandler(stream=sys.stderr)
    console.setLevel(logging.DEBUG)
    console.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
    setattr(console, _CONSOLE_MARKER, True)
    logger.addHandler(console)


def _coerce_value(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Path):
        return str(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _coerce_value(dataclasses.asdict(value))
    if isinstance(value, Mapping):
        return {str(k): _coerce_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_coerce_value(item) for item in value]
    return repr(value)


def _writable_log_path(log_dir: Path, filename: str) -> Path:
    """Create ``log_dir/filename`` (0600), or the same under the temp dir."""

    try:
        return _touch_log_file(log_dir, filename)
    except PermissionError:
        return _touch_log_file(_fallback_log_dir(), filename)


def _touch_log_file(log_dir: Path, filename: str) -> Path:
    log_dir.mkdir(parents=True, exist_ok=True)
    path = log_dir / filename
    path.touch(exist_ok=True)
    for target, mode in ((log_dir, 0o700), (path, 0o600)):
        try:
            target.chmod(mode)
        except PermissionError:  # pragma: no cover - depends on filesystem
            pass
    return path


def _fallback_log_dir() -> Path:
    return Path(tempfile.gettempdir()) / _FALLBACK_DIRNAME
