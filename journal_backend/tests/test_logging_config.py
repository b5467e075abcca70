import json
import logging
import sys
from pathlib import Path

import pytest

from src.api.logging_config import JsonFormatter, configure_logging


@pytest.fixture()
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def test_json_formatter_includes_extra():
    record = logging.LogRecord(
        name="src.api.note_service",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Note saved %s",
        args=("ok",),
        exc_info=None,
    )
    record.note_id = "abc"
    payload = json.loads(JsonFormatter().format(record))
    assert payload["message"] == "Note saved ok"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "src.api.note_service"
    assert payload["extra"] == {"note_id": "abc"}
    assert payload["timestamp"].endswith("+00:00")


def test_json_formatter_includes_exception():
    try:
        raise ValueError("bad value")
    except ValueError:
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), exc_info=None)
        record.exc_info = sys.exc_info()
    payload = json.loads(JsonFormatter().format(record))
    assert "bad value" in payload["exc_info"]


def test_configure_logging_does_not_stack_handlers(tmp_path: Path, restore_root_logger):
    configure_logging("DEBUG", str(tmp_path / "logs"), "journal.log")
    configure_logging("DEBUG", str(tmp_path / "logs"), "journal.log")

    ours = [h for h in restore_root_logger.handlers if getattr(h, "_journal_handler", False)]
    assert len(ours) == 2
    assert restore_root_logger.level == logging.DEBUG

    logging.getLogger("src.api.test").info("written to file", extra={"date": "2024-01-01"})
    for handler in ours:
        handler.flush()
    lines = (tmp_path / "logs" / "journal.log").read_text(encoding="utf-8").splitlines()
    last = json.loads(lines[-1])
    assert last["message"] == "written to file"
    assert last["extra"]["date"] == "2024-01-01"
