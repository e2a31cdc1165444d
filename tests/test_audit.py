"""Tests for compilation logging and event sinks."""

import logging
from uuid import uuid4

import pytest
from structlog.testing import capture_logs

from coa_compiler.audit import (
    LOGGER_NAME,
    CompilationLogger,
    EventSink,
    InMemoryEventSink,
    create_correlation_id,
)
from coa_compiler.models.audit import CompilationEventBuilder, CompilationEventType


class FailingSink(EventSink):
    """Sink whose backing store is down."""

    def append_event(self, event):
        raise RuntimeError("sink offline")


class TestInMemoryEventSink:
    """Tests for the in-memory sink."""

    def test_events_are_appended_in_order(self, sink):
        """Test that events come back in the order they were logged."""
        correlation_id = uuid4()
        first = CompilationEventBuilder.compilation_started("Joe's Diner", "restaurant", "usa", "small", correlation_id)
        second = CompilationEventBuilder.plan_generated(6, 360, "small", correlation_id)
        sink.append_event(first)
        sink.append_event(second)
        assert sink.events == [first, second]

    def test_events_of_type(self, sink):
        """Test filtering by type and correlation id."""
        mine, other = uuid4(), uuid4()
        sink.append_event(CompilationEventBuilder.template_layer_missing("industries", "space_mining", mine))
        sink.append_event(CompilationEventBuilder.template_layer_missing("countries", "atlantis", other))
        sink.append_event(CompilationEventBuilder.plan_generated(6, 360, "small", mine))

        missing = sink.events_of_type(CompilationEventType.TEMPLATE_LAYER_MISSING)
        assert len(missing) == 2
        assert len(sink.events_of_type(CompilationEventType.TEMPLATE_LAYER_MISSING, mine)) == 1

    def test_events_is_a_copy(self, sink):
        """Test that callers cannot remove stored events."""
        sink.append_event(CompilationEventBuilder.configuration_error("missing base"))
        sink.events.clear()
        assert len(sink.events) == 1


class TestCompilationLogger:
    """Tests for CompilationLogger."""

    def test_log_without_sink(self):
        """Test that local-only logging reports success."""
        logger = CompilationLogger()
        assert logger.log(CompilationEventBuilder.configuration_error("missing base")) is True

    def test_log_forwards_to_sink(self, sink):
        """Test that events reach the configured sink."""
        logger = CompilationLogger(sink=sink)
        event = CompilationEventBuilder.configuration_error("missing base")
        assert logger.log(event) is True
        assert sink.events == [event]

    def test_sink_failure_does_not_raise(self):
        """Test that a broken sink is reported, not propagated."""
        logger = CompilationLogger(sink=FailingSink())
        assert logger.log(CompilationEventBuilder.configuration_error("missing base")) is False

    def test_correlation_ids_are_unique(self):
        """Test that every compilation gets its own correlation id."""
        assert create_correlation_id() != create_correlation_id()

    def test_level_does_not_touch_shared_logger(self):
        """Test that constructing loggers leaves the stdlib logger level alone."""
        before = logging.getLogger(LOGGER_NAME).level
        CompilationLogger(level="DEBUG")
        CompilationLogger(level="ERROR")
        assert logging.getLogger(LOGGER_NAME).level == before

    def test_events_below_level_are_not_logged_locally(self, sink):
        """Test that each logger filters by its own level but still feeds the sink."""
        correlation_id = uuid4()
        started = CompilationEventBuilder.compilation_started("Joe's Diner", "restaurant", "usa", "small", correlation_id)
        failed = CompilationEventBuilder.configuration_error("missing base")
        with capture_logs() as logs:
            quiet = CompilationLogger(sink=sink, level="error")
            chatty = CompilationLogger(level="info")
            quiet.log(started)
            quiet.log(failed)
            chatty.log(started)
        assert [entry["event_type"] for entry in logs] == [
            CompilationEventType.CONFIGURATION_ERROR.value,
            CompilationEventType.COMPILATION_STARTED.value,
        ]
        assert sink.events == [started, failed]

    def test_unknown_level_rejected(self):
        """Test that a misspelled level fails fast."""
        with pytest.raises(ValueError):
            CompilationLogger(level="chatty")
