"""
Data Models Package

This package contains all Pydantic models used by the COA compiler.
All data flowing through a compilation must conform to these schemas.
"""

from coa_compiler.models.coa import (
    NORMAL_BALANCE_BY_TYPE,
    Account,
    AccountProvenance,
    AccountReference,
    AccountSubtype,
    AccountType,
    BusinessRequirements,
    BusinessSize,
    COAStructure,
    GeneratedCOA,
    ImplementationStep,
    Industry,
    NormalBalance,
    PostingRule,
    PostingType,
    SelectedTemplates,
    SmartCodeMapping,
    StepStatus,
    Template,
    TemplateCategory,
    TriggerCondition,
    ValidationResult,
    ValidationRuleType,
    ValidationStatus,
)
from coa_compiler.models.audit import (
    CompilationEvent,
    CompilationEventBuilder,
    CompilationEventType,
    EventSeverity,
)

__all__ = [
    # COA models
    "NORMAL_BALANCE_BY_TYPE",
    "Account",
    "AccountProvenance",
    "AccountReference",
    "AccountSubtype",
    "AccountType",
    "BusinessRequirements",
    "BusinessSize",
    "COAStructure",
    "GeneratedCOA",
    "ImplementationStep",
    "Industry",
    "NormalBalance",
    "PostingRule",
    "PostingType",
    "SelectedTemplates",
    "SmartCodeMapping",
    "StepStatus",
    "Template",
    "TemplateCategory",
    "TriggerCondition",
    "ValidationResult",
    "ValidationRuleType",
    "ValidationStatus",
    # Event models
    "CompilationEvent",
    "CompilationEventBuilder",
    "CompilationEventType",
    "EventSeverity",
]
