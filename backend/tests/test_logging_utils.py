import logging

from utils.logging_utils import (
    ContextFilter,
    StructuredLogger,
    clear_logging_context,
    get_logging_context,
    set_logging_context,
)


def test_context_is_set_merged_and_cleared():
    set_logging_context(request_id="abc")
    set_logging_context(path="/posts")
    assert get_logging_context() == {"request_id": "abc", "path": "/posts"}
    clear_logging_context()
    assert get_logging_context() == {}


def test_context_filter_copies_context_onto_records():
    set_logging_context(request_id="xyz")
    try:
        record = logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)
        assert ContextFilter().filter(record)
        assert record.request_id == "xyz"
    finally:
        clear_logging_context()


def test_structured_logger_includes_context(caplog):
    set_logging_context(request_id="req-1")
    try:
        with caplog.at_level(logging.INFO, logger="test.structured"):
            StructuredLogger("test.structured").info("hello", extra={"post_id": 7})
    finally:
        clear_logging_context()
    record = caplog.records[-1]
    assert record.request_id == "req-1"
    assert record.post_id == 7
