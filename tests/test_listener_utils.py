import inspect
import io
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path

import pytest

from starterapp.listener_models import MessageResponse
from starterapp.listener_utils import (
    EVENT_TYPE_REQUEST,
    EVENT_TYPE_RESPONSE,
    HEALTH_FILE,
    contains_event_type,
    error_data,
    event_type,
    run_health,
    terminal_logger,
    write_health,
)


@pytest.mark.parametrize("event", ["event_created", "event_updated", "participant_enrolled"])
def test_contains_request_event_types(event):
    assert contains_event_type(event, EVENT_TYPE_REQUEST) is True


def test_contains_event_type_rejects_unknown():
    assert contains_event_type("STARTER_EVENT_RESPONSE", EVENT_TYPE_REQUEST) is False
    assert contains_event_type("STARTER_EVENT_RESPONSE", EVENT_TYPE_RESPONSE) is True


def test_event_type_reads_custom_property():
    message = MessageResponse(data=b"{}", custom={"eventType": "event_created", "other": 1})
    assert event_type(message) == "event_created"


def test_event_type_matches_case_insensitively():
    message = MessageResponse(custom={"EVENTTYPE": "event_updated"})
    assert event_type(message) == "event_updated"


def test_event_type_missing_is_empty():
    assert event_type(MessageResponse(custom={})) == ""
    assert event_type(MessageResponse(custom=None)) == ""


def test_event_type_rejects_non_string():
    with pytest.raises(ValueError):
        event_type(MessageResponse(custom={"eventType": 5}))


def test_event_type_rejects_non_object():
    with pytest.raises(ValueError):
        event_type(MessageResponse(custom=["event_created"]))


def test_error_data_records_caller_location():
    error = RuntimeError("boom")
    line = inspect.currentframe().f_lineno + 1
    props = error_data(error)
    assert props.error is error
    assert props.line_error == line
    assert Path(props.file_error).name == "test_listener_utils.py"


def test_terminal_logger_format():
    stream = io.StringIO()
    logger = terminal_logger(stream)
    logger.info("hello")
    line = stream.getvalue().strip()
    stamp, rest = line.split(" ", 1)
    assert rest == "| INFO | hello"
    assert datetime.fromisoformat(stamp).tzinfo is not None


def test_write_health_overwrites_start_only(tmp_path):
    path = tmp_path / "health.txt"
    path.write_bytes(b"x" * 80)
    now = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    text = write_health(path, now)
    content = path.read_text()
    assert text == str(now)
    assert content.startswith(text)
    assert len(content) == 80
    assert content.endswith("x")


def test_write_health_creates_file(tmp_path):
    path = tmp_path / "new.txt"
    text = write_health(path)
    assert path.read_text() == text


def test_run_health_writes_once_when_stopped(tmp_path, capsys):
    stop = threading.Event()
    stop.set()
    run_health(tmp_path, logging.getLogger("test.health"), interval=0.01, stop_event=stop)
    content = (tmp_path / HEALTH_FILE).read_text()
    assert content
    out = capsys.readouterr().out
    assert out.startswith("Health:  ")
    assert content in out


def test_run_health_logs_when_directory_missing(tmp_path, caplog):
    stop = threading.Event()
    stop.set()
    with caplog.at_level(logging.ERROR, logger="test.health.missing"):
        run_health(
            tmp_path / "absent",
            logging.getLogger("test.health.missing"),
            interval=0.01,
            stop_event=stop,
        )
    messages = [record.getMessage() for record in caplog.records]
    assert len(messages) == 2
    assert all(message.startswith("Error Health: ") for message in messages)