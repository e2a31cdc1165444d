"""Compilation logging package."""

from coa_compiler.audit.logger import (
    LOGGER_NAME,
    CompilationLogger,
    create_correlation_id,
)
from coa_compiler.audit.sink import EventSink, InMemoryEventSink

__all__ = [
    "LOGGER_NAME",
    "CompilationLogger",
    "EventSink",
    "InMemoryEventSink",
    "create_correlation_id",
]
