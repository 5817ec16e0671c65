# =============================================================================
# tests/test_logger.py - JSON log lines
# =============================================================================

import io
import json

from entregas.logger import StructuredLogger


def _last_entry(stream):
    return json.loads(stream.getvalue().strip().splitlines()[-1])


def test_json_line_with_extra(tmp_path):
    stream = io.StringIO()
    log = StructuredLogger(
        name="tests.logger.extra", stream=stream, log_file=str(tmp_path / "a.log"),
    )

    log.info("Role resolved: %s", "gerente", extra={"user_id": "u1", "stores": 2})

    entry = _last_entry(stream)
    assert entry["message"] == "Role resolved: gerente"
    assert entry["level"] == "INFO"
    assert entry["logger_name"] == "tests.logger.extra"
    assert entry["extra"] == {"user_id": "u1", "stores": 2}
    assert (tmp_path / "a.log").read_text(encoding="utf-8").strip()


def test_exception_is_captured(tmp_path):
    stream = io.StringIO()
    log = StructuredLogger(
        name="tests.logger.exc", stream=stream, log_file=str(tmp_path / "b.log"),
    )

    try:
        raise ValueError("bad row")
    except ValueError:
        log.exception("Lookup failed")

    entry = _last_entry(stream)
    assert "ValueError: bad row" in entry["exception"]


def test_handlers_attached_once(tmp_path):
    first = StructuredLogger(name="tests.logger.once", log_file=str(tmp_path / "c.log"))
    StructuredLogger(name="tests.logger.once", log_file=str(tmp_path / "c.log"))

    assert len(first.logger.handlers) == 2
