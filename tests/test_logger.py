import json
import logging

from utils.logger import JsonFormatter, get_logger


def _record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("orchestrator.core", logging.INFO, __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_merges_extra_fields():
    line = JsonFormatter().format(_record("Search started", extra_fields={"request_id": "r1", "model": "m1"}))
    data = json.loads(line)

    assert data["message"] == "Search started"
    assert data["level"] == "INFO"
    assert data["logger"] == "orchestrator.core"
    assert data["request_id"] == "r1"
    assert data["model"] == "m1"
    assert data["timestamp"].endswith("Z")


def test_json_formatter_keeps_cjk_unescaped():
    line = JsonFormatter().format(_record("香港天氣"))
    assert "香港天氣" in line


def test_get_logger_returns_named_logger():
    logger = get_logger("tools.web.page_fetcher")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "tools.web.page_fetcher"
