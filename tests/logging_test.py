import json
import logging
import logging.handlers

import pytest

from faultline.core.config import LoggerConfig
from faultline.utils.logging import ColouredFormatter
from faultline.utils.logging import FaultlineFormatter
from faultline.utils.logging import JSONFormatter
from faultline.utils.logging import configure
from faultline.utils.logging import get_logger


def _record(level=logging.INFO, msg="Captured error", **extra):
    record = logging.LogRecord(
        name="faultline.core.store",
        level=level,
        pathname=__file__,
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
        func="log",
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def framework_logger():
    logger = logging.getLogger("faultline")
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


@pytest.mark.unit
class TestFormatters:
    def test_extra_fields_rendered_sorted(self):
        formatter = FaultlineFormatter("%(extra)s%(message)s")
        record = _record(store="MemoryErrorStore", record="abc")
        assert formatter.format(record) == (
            "record: abc store: MemoryErrorStore Captured error"
        )

    def test_no_extra_fields(self):
        formatter = FaultlineFormatter("%(extra)s%(message)s")
        assert formatter.format(_record()) == "Captured error"

    def test_qualname_defaults_to_logger_and_function(self):
        formatter = FaultlineFormatter("%(qualName)s")
        assert formatter.format(_record()) == "faultline.core.store.log"

    def test_coloured_plain(self):
        formatter = ColouredFormatter(
            "%(levelname)s %(qualName)s %(message)s",
            extra_format="[{key}: {value}]",
        )
        text = formatter.format(_record(level=logging.WARNING))
        assert text == " WARNING faultline.core.store.log Captured error"
        assert "\x1b[" not in text

    def test_coloured_tty(self):
        formatter = ColouredFormatter("%(levelname)s %(message)s")
        formatter.is_tty = True
        text = formatter.format(_record(level=logging.CRITICAL))
        assert text.startswith(ColouredFormatter.COLORS["CRITICAL"])
        assert "CRITICAL" in text

    def test_trace_level_name(self):
        formatter = ColouredFormatter("%(levelname)s")
        assert formatter.format(_record(level=5)) == "   TRACE"

    def test_json(self):
        payload = json.loads(
            JSONFormatter().format(_record(store="MemoryErrorStore"))
        )
        assert payload["level"] == "INFO"
        assert payload["logger"] == "faultline.core.store"
        assert payload["message"] == "Captured error"
        assert payload["line"] == 42
        assert payload["store"] == "MemoryErrorStore"

    def test_json_without_extras(self):
        payload = json.loads(
            JSONFormatter(extras=False).format(_record(store="x"))
        )
        assert "store" not in payload


@pytest.mark.integration
class TestConfigure:
    def test_console_only_by_default(self, framework_logger):
        logger = configure(LoggerConfig())
        assert logger is framework_logger
        assert len(logger.handlers) == 1
        handler = logger.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert isinstance(handler.formatter, ColouredFormatter)
        assert logger.level == logging.DEBUG

    def test_reconfigure_replaces_handlers(self, framework_logger):
        configure(LoggerConfig())
        configure(LoggerConfig())
        assert len(framework_logger.handlers) == 1

    def test_json_and_file(self, framework_logger, tmp_path):
        config = LoggerConfig()
        config.as_json = True
        config.level = "INFO"
        file = type(config.file)()
        file.enable = True
        file.path = str(tmp_path / "logs")
        tty = type(config.tty)()
        tty.enable = False
        config.file = file
        config.tty = tty
        logger = configure(config)
        (handler,) = logger.handlers
        assert isinstance(handler, logging.handlers.RotatingFileHandler)
        assert isinstance(handler.formatter, JSONFormatter)
        assert logger.level == logging.INFO
        get_logger("faultline.core.store").error("boom", extra={"k": "v"})
        handler.flush()
        line = (tmp_path / "logs" / "faultline.log").read_text().strip()
        assert json.loads(line)["k"] == "v"


@pytest.mark.unit
def test_get_logger():
    assert get_logger("faultline.core.hooks").name == "faultline.core.hooks"
