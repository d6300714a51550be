import io
import json
import logging
import sys

from weightcut.logging import JSONFormatter, TextFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="weightcut.report",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Built cut report (days_until=%d)",
        args=(2,),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_basic_fields(self):
        payload = json.loads(JSONFormatter().format(_record()))
        assert payload["level"] == "INFO"
        assert payload["logger"] == "weightcut.report"
        assert payload["message"] == "Built cut report (days_until=2)"
        assert "timestamp" in payload

    def test_weightcut_extras_included(self):
        payload = json.loads(
            JSONFormatter().format(_record(weightcut_days_until=2, weightcut_protocol="body_comp", other="x"))
        )
        assert payload["weightcut_days_until"] == 2
        assert payload["weightcut_protocol"] == "body_comp"
        assert "other" not in payload

    def test_exception_included(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = _record()
            record.exc_info = sys.exc_info()
        payload = json.loads(JSONFormatter().format(record))
        assert "ValueError: boom" in payload["exception"]


class TestSetupLogging:
    def test_json_handler(self):
        setup_logging("json", logging.DEBUG)
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_text_handler_replaces_previous(self):
        setup_logging("json")
        setup_logging("text", logging.WARNING)
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, TextFormatter)
        assert root.handlers[0].level == logging.WARNING

    def test_writes_to_given_stream(self):
        stream = io.StringIO()
        setup_logging("json", logging.INFO, stream=stream)
        logging.getLogger("weightcut.test").info("hello", extra={"weightcut_protocol": "build"})
        payload = json.loads(stream.getvalue().splitlines()[-1])
        assert payload["message"] == "hello"
        assert payload["weightcut_protocol"] == "build"


class TestTextFormatter:
    def test_extras_appended(self):
        line = TextFormatter().format(_record(weightcut_days_until=2))
        assert line.endswith("Built cut report (days_until=2) [days_until=2]")

    def test_without_extras(self):
        line = TextFormatter().format(_record())
        assert line.endswith("weightcut.report: Built cut report (days_until=2)")
