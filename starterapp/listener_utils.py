"""Helpers for the topic listener: event types, error locations, logging, health file."""

from __future__ import annotations

import inspect
import json
import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Optional, TextIO

from .listener_models import ErrorProps, MessageResponse

EVENT_TYPE_REQUEST = ("event_created", "event_updated", "participant_enrolled")
EVENT_TYPE_RESPONSE = ("STARTER_EVENT_RESPONSE",)

PROCESS_HEALTH_CHECK = "Health check"
PROCESS_APP_LOG = "Appinsight and terminal log"
PROCESS_PANIC_LOG = "Panic log"
PROCESS_COMPLETE_ERROR = "Complete message error"
PROCESS_START_PROJECT = "Start starter listener"

TAGS_SERVICE_NEW_SERVICE = ("service", "New service")
TAGS_SERVICE_CALLBACK = ("service", "callback")
TAGS_PANIC = ("service", "panic")
TAGS_LOG = ("service", "log")
TAGS_HEALTH_CHECK = ("main", "health")

HEALTH_FILE = "health.txt"


def contains_event_type(event: str, events: Iterable[str]) -> bool:
    """Tell whether ``event`` is one of ``events``."""
    return event in events


def event_type(message: MessageResponse) -> str:
    """Read the ``eventType`` custom property of a message; empty when absent."""
    try:
        decoded: Any = json.loads(json.dumps(message.custom))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"cannot encode custom properties: {exc}") from exc
    if decoded is None:
        return ""
    if not isinstance(decoded, dict):
        raise ValueError(
            f"cannot read event type from custom properties of type {type(decoded).__name__}"
        )
    if "eventType" in decoded:
        value = decoded["eventType"]
    else:
        value = next(
            (item for key, item in decoded.items() if key.casefold() == "eventtype"),
            None,
        )
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError("custom property 'eventType' must be a string")
    return value


def error_data(error: BaseException) -> ErrorProps:
    """Wrap ``error`` together with the file and line of the caller."""
    frame = inspect.currentframe()
    caller = frame.f_back if frame is not None else None
    try:
        file_name = caller.f_code.co_filename if caller is not None else ""
        line = caller.f_lineno if caller is not None else 0
    finally:
        del frame, caller
    return ErrorProps(error=error, file_error=file_name, line_error=line)


class _TerminalFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created).astimezone().isoformat(timespec="seconds")
        return f"{stamp} | {record.levelname.upper()} | {record.getMessage()}"


def terminal_logger(stream: Optional[TextIO] = None) -> logging.Logger:
    """A logger writing ``<time> | LEVEL | message`` lines to ``stream`` (stdout by default)."""
    logger = logging.Logger("starterapp.terminal", level=logging.DEBUG)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(_TerminalFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def write_health(path: "str | Path", now: Optional[datetime] = None) -> str:
    """Write the current time at the start of ``path`` without truncating it."""
    text = str(now if now is not None else datetime.now().astimezone())
    target = Path(path)
    mode = "r+b" if target.exists() else "wb"
    with target.open(mode) as handle:
        handle.seek(0)
        handle.write(text.encode("utf-8"))
    return text


def _report(logger: logging.Logger, error: BaseException) -> None:
    logger.error(
        "Error Health: %s",
        error,
        extra={"tags": TAGS_HEALTH_CHECK, "process": PROCESS_HEALTH_CHECK},
    )


def run_health(
    temp_path: "str | Path",
    logger: logging.Logger,
    interval: float = 10.0,
    stop_event: Optional[threading.Event] = None,
) -> None:
    """Stamp ``<temp_path>/health.txt`` with the time every ``interval`` seconds.

    Runs until ``stop_event`` is set; without one it runs forever.
    """
    stop = stop_event if stop_event is not None else threading.Event()
    path = Path(temp_path) / HEALTH_FILE
    try:
        handle = path.open("wb")
    except OSError as exc:
        handle = None
        _report(logger, exc)
    try:
        while True:
            now = datetime.now().astimezone()
            print("Health: ", now)
            if handle is None:
                _report(logger, OSError(f"health file {path} is not open"))
            else:
                try:
                    handle.seek(0)
                    handle.write(str(now).encode("utf-8"))
                    handle.flush()
                except OSError as exc:
                    _report(logger, exc)
            if stop.wait(interval):
                break
    finally:
        if handle is not None:
            handle.close()