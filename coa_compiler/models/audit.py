"""
Compilation Event Models

Every significant step of a compilation is recorded as an event.
This provides:
1. Traceability of which templates and overrides produced an artifact
2. Debugging information when a COA looks wrong
3. A feed for embedding applications that want their own audit trail

DESIGN DECISION: Events are append-only. They are emitted, never edited.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class CompilationEventType(str, Enum):
    """
    Types of events we record.

    Every stage of the compilation pipeline has its own event type.
    """
    COMPILATION_STARTED = "compilation_started"
    TEMPLATE_RESOLVED = "template_resolved"
    TEMPLATE_LAYER_MISSING = "template_layer_missing"
    ACCOUNTS_CONSOLIDATED = "accounts_consolidated"
    SMART_CODES_GENERATED = "smart_codes_generated"
    POSTING_RULES_ADAPTED = "posting_rules_adapted"
    VALIDATION_COMPLETED = "validation_completed"
    PLAN_GENERATED = "plan_generated"
    COMPILATION_COMPLETED = "compilation_completed"
    CONFIGURATION_ERROR = "configuration_error"


class EventSeverity(str, Enum):
    """Severity level for compilation events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CompilationEvent(BaseModel):
    """
    A single compilation event.

    Correlation IDs tie together all events of one compilation.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )
    event_type: CompilationEventType
    severity: EventSeverity = EventSeverity.INFO

    organization_id: Optional[str] = Field(
        default=None,
        description="Organization the compilation is for, once derived"
    )
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID shared by all events of one compilation"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "organization_id": self.organization_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class CompilationEventBuilder:
    """
    Helper class to build compilation events with common patterns.

    Usage:
        event = CompilationEventBuilder.compilation_started(requirements, correlation_id)
    """

    @staticmethod
    def compilation_started(
        business_name: str,
        industry: str,
        country: str,
        business_size: str,
        correlation_id: UUID,
    ) -> CompilationEvent:
        return CompilationEvent(
            event_type=CompilationEventType.COMPILATION_STARTED,
            correlation_id=correlation_id,
            description=f"Compiling COA for {business_name}",
            details={
                "business_name": business_name,
                "industry": industry,
                "country": country,
                "business_size": business_size,
            },
        )

    @staticmethod
    def template_resolved(
        category: str,
        template_id: str,
        version: str,
        correlation_id: UUID,
    ) -> CompilationEvent:
        return CompilationEvent(
            event_type=CompilationEventType.TEMPLATE_RESOLVED,
            correlation_id=correlation_id,
            description=f"Resolved {category} template: {template_id}",
            details={
                "category": category,
                "template_id": template_id,
                "version": version,
            },
        )

    @staticmethod
    def template_layer_missing(
        category: str,
        key: str,
        correlation_id: UUID,
    ) -> CompilationEvent:
        return CompilationEvent(
            event_type=CompilationEventType.TEMPLATE_LAYER_MISSING,
            severity=EventSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"No {category} template for '{key}', layer skipped",
            details={
                "category": category,
                "key": key,
            },
        )

    @staticmethod
    def accounts_consolidated(
        total_accounts: int,
        overridden_codes: list[str],
        correlation_id: UUID,
    ) -> CompilationEvent:
        return CompilationEvent(
            event_type=CompilationEventType.ACCOUNTS_CONSOLIDATED,
            correlation_id=correlation_id,
            description=(
                f"Consolidated {total_accounts} accounts "
                f"({len(overridden_codes)} overridden)"
            ),
            details={
                "total_accounts": total_accounts,
                "overridden_codes": overridden_codes,
            },
        )

    @staticmethod
    def smart_codes_generated(
        generated_count: int,
        industry_short_code: str,
        correlation_id: UUID,
    ) -> CompilationEvent:
        return CompilationEvent(
            event_type=CompilationEventType.SMART_CODES_GENERATED,
            correlation_id=correlation_id,
            description=f"Generated {generated_count} smart codes",
            details={
                "generated_count": generated_count,
                "industry_short_code": industry_short_code,
            },
        )

    @staticmethod
    def posting_rules_adapted(
        rule_count: int,
        mapping_count: int,
        correlation_id: UUID,
    ) -> CompilationEvent:
        return CompilationEvent(
            event_type=CompilationEventType.POSTING_RULES_ADAPTED,
            correlation_id=correlation_id,
            description=f"Adapted {rule_count} posting rules into {mapping_count} mappings",
            details={
                "rule_count": rule_count,
                "mapping_count": mapping_count,
            },
        )

    @staticmethod
    def validation_completed(
        fail_count: int,
        warning_count: int,
        correlation_id: UUID,
    ) -> CompilationEvent:
        severity = EventSeverity.INFO
        if fail_count:
            severity = EventSeverity.ERROR
        elif warning_count:
            severity = EventSeverity.WARNING
        return CompilationEvent(
            event_type=CompilationEventType.VALIDATION_COMPLETED,
            severity=severity,
            correlation_id=correlation_id,
            description=(
                f"Validation finished with {fail_count} failures "
                f"and {warning_count} warnings"
            ),
            details={
                "fail_count": fail_count,
                "warning_count": warning_count,
            },
        )

    @staticmethod
    def plan_generated(
        step_count: int,
        total_minutes: int,
        business_size: str,
        correlation_id: UUID,
    ) -> CompilationEvent:
        return CompilationEvent(
            event_type=CompilationEventType.PLAN_GENERATED,
            correlation_id=correlation_id,
            description=f"Implementation plan: {step_count} steps, {total_minutes} minutes",
            details={
                "step_count": step_count,
                "total_minutes": total_minutes,
                "business_size": business_size,
            },
        )

    @staticmethod
    def compilation_completed(
        organization_id: str,
        account_count: int,
        rule_count: int,
        ready: bool,
        correlation_id: UUID,
    ) -> CompilationEvent:
        return CompilationEvent(
            event_type=CompilationEventType.COMPILATION_COMPLETED,
            organization_id=organization_id,
            correlation_id=correlation_id,
            description=f"COA compiled for {organization_id}",
            details={
                "account_count": account_count,
                "rule_count": rule_count,
                "ready_for_implementation": ready,
            },
        )

    @staticmethod
    def configuration_error(
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> CompilationEvent:
        return CompilationEvent(
            event_type=CompilationEventType.CONFIGURATION_ERROR,
            severity=EventSeverity.ERROR,
            correlation_id=correlation_id,
            description="Compilation aborted: template store misconfigured",
            error_message=error_message,
        )
