"""
Compilation Logger

DESIGN DECISION: Every compilation step is logged.
This provides:
1. Traceability from an artifact back to the templates that built it
2. Debugging capability when overrides behave unexpectedly
3. A hook for applications that keep their own audit trail

The logger:
- Writes a structured local log at or above its own level
- Forwards events to an optional sink
- Never lets a sink failure abort a compilation
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from coa_compiler.audit.sink import EventSink
from coa_compiler.models.audit import CompilationEvent, EventSeverity


LOGGER_NAME = "coa_compiler"

_SEVERITY_LEVELS = {
    EventSeverity.ERROR: logging.ERROR,
    EventSeverity.WARNING: logging.WARNING,
    EventSeverity.DEBUG: logging.DEBUG,
}


# JSON lines through the stdlib logger named LOGGER_NAME
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class CompilationLogger:
    """
    Central logging service for compilations.

    Every event goes to the structured local log first, then to the sink
    if the embedding application supplied one.
    """

    def __init__(
        self,
        sink: Optional[EventSink] = None,
        level: str = "INFO",
    ):
        """
        Initialize the logger.

        Args:
            sink: Destination for events. If None, only logs locally.
            level: Minimum level for this instance's local log. The level of
                the shared "coa_compiler" stdlib logger is left to the
                application. Events below it still reach the sink.
        """
        threshold = logging.getLevelName(level.upper())
        if not isinstance(threshold, int):
            raise ValueError(f"Unknown log level: {level}")
        self._sink = sink
        self._level = threshold
        self._logger = structlog.get_logger(LOGGER_NAME)

    def log(self, event: CompilationEvent) -> bool:
        """
        Log a compilation event.

        Logs locally when the event meets this instance's level. Forwards
        to the sink if one is configured.

        Returns True if the sink write succeeded (or no sink configured).
        """
        log_dict = event.to_log_dict()
        severity_level = _SEVERITY_LEVELS.get(event.severity, logging.INFO)

        if severity_level >= self._level:
            self._logger.log(severity_level, "compilation_event", **log_dict)

        if self._sink:
            try:
                return self._sink.append_event(event)
            except Exception as e:
                # The compilation carries on without the sink
                self._logger.error(
                    "event_sink_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for one compilation.

    Every event emitted while compiling the same business carries it.
    """
    return uuid4()
