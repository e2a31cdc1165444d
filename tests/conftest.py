"""Shared fixtures for the COA compiler tests."""

from datetime import datetime, timezone

import pytest

from coa_compiler.audit import CompilationLogger, InMemoryEventSink
from coa_compiler.config import CompilerSettings
from coa_compiler.orchestrator import COACompiler
from coa_compiler.templates import create_default_repository


FIXED_NOW = datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def settings():
    """Default settings, isolated from any local .env file."""
    return CompilerSettings(_env_file=None)


@pytest.fixture
def repository():
    return create_default_repository()


@pytest.fixture
def sink():
    return InMemoryEventSink()


@pytest.fixture
def compiler(repository, settings, sink):
    """Compiler over the built-in templates with a frozen clock."""
    return COACompiler(
        repository=repository,
        settings=settings,
        logger=CompilationLogger(sink=sink, level=settings.log_level),
        clock=lambda: FIXED_NOW,
    )
