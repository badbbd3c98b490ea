"""Tests for session-id aware logging."""

import io
import logging

from bikewerkstatt.config import LOG_FORMAT, load_config
from bikewerkstatt.logging_context import (
    SessionIdFilter,
    add_session_filter,
    get_session_id,
    get_session_logger,
    new_session_id,
    set_session_id,
)


class TestSessionId:
    def test_prefix(self):
        assert new_session_id("ADM").startswith("ADM-")
        assert len(new_session_id()) == len("WIZ-") + 6

    def test_set_and_get(self):
        set_session_id("WIZ-abc123")
        assert get_session_id() == "WIZ-abc123"

    def test_filter_adds_session_id(self):
        set_session_id("WIZ-xyz789")
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)
        assert SessionIdFilter().filter(record)
        assert record.session_id == "WIZ-xyz789"

    def test_filter_attached_once(self):
        name = "bikewerkstatt.tests.session_logger"
        get_session_logger(name)
        logger = get_session_logger(name)
        assert sum(isinstance(f, SessionIdFilter) for f in logger.filters) == 1


class TestLogFormat:
    def _handler(self):
        stream = io.StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        add_session_filter(handler)
        return stream, handler

    def test_format_includes_session_id(self):
        stream, handler = self._handler()
        logger = get_session_logger("bikewerkstatt.tests.format_session")
        logger.addHandler(handler)
        try:
            set_session_id("WIZ-fmt123")
            logger.warning("Date selected")
        finally:
            logger.removeHandler(handler)
        assert "[WIZ-fmt123] WARNING: Date selected" in stream.getvalue()

    def test_plain_logger_records_still_format(self):
        stream, handler = self._handler()
        logger = logging.getLogger("bikewerkstatt.tests.format_plain")
        logger.addHandler(handler)
        try:
            set_session_id("ADM-plain1")
            logger.warning("Export written")
        finally:
            logger.removeHandler(handler)
        assert "[ADM-plain1] WARNING: Export written" in stream.getvalue()

    def test_handler_filter_attached_once(self):
        _, handler = self._handler()
        add_session_filter(handler)
        assert sum(isinstance(f, SessionIdFilter) for f in handler.filters) == 1

    def test_load_config_filters_root_handlers(self):
        handler = logging.StreamHandler(io.StringIO())
        root = logging.getLogger()
        root.addHandler(handler)
        try:
            load_config()
            assert any(isinstance(f, SessionIdFilter) for f in handler.filters)
        finally:
            root.removeHandler(handler)
