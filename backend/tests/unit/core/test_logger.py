"""Unit tests for the JSON log formatter."""

from __future__ import annotations

import json
import logging

from account_api.core.logger import JSONFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("account_api.test", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_renders_message_and_extras():
    payload = json.loads(JSONFormatter().format(_record(account_id="acc-1", removed=3, job="token_gc")))
    assert payload["message"] == "hello world"
    assert payload["level"] == "INFO"
    assert payload["account_id"] == "acc-1"
    assert payload["removed"] == 3
    assert payload["job"] == "token_gc"


def test_redacts_secrets():
    line = JSONFormatter().format(_record(password="Passw0rd!", access="eyJ.secret", refresh="eyJ.other"))
    payload = json.loads(line)
    assert payload["password"] == "***"
    assert payload["access"] == "***"
    assert "Passw0rd!" not in line
    assert "eyJ.secret" not in line


def test_keeps_non_ascii():
    line = JSONFormatter().format(
        logging.LogRecord("x", logging.INFO, __file__, 1, "東京都", None, None)
    )
    assert "東京都" in line
