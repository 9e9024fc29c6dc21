"""Unit tests for the JSON log formatter"""

import json
import logging
from fintrack.infrastructure.observability.logging import CustomJsonFormatter


def test_formatter_emits_service_level_and_extra_fields():
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s", service_name="fintrack-test")
    record = logging.LogRecord("fintrack", logging.WARNING, __file__, 1, "Invoice closed, mutation rejected", None, None)
    record.scope = "group"

    payload = json.loads(formatter.format(record))

    assert payload["service"] == "fintrack-test"
    assert payload["level"] == "WARNING"
    assert payload["message"] == "Invoice closed, mutation rejected"
    assert payload["scope"] == "group"
    assert payload["timestamp"]
