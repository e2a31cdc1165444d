"""
Implementation Planning

Produces the rollout plan that accompanies a compiled COA.

The plan is a REPORT. Nothing here executes a step or changes its status;
it depends only on the business size, never on the accounts or rules.
"""

import math
from dataclasses import dataclass
from graphlib import TopologicalSorter
from typing import Iterable, Optional

from coa_compiler.config import CompilerSettings, get_settings
from coa_compiler.models.coa import BusinessSize, ImplementationStep


@dataclass(frozen=True)
class StepBlueprint:
    """Fixed definition of one plan step before sizing."""

    id: str
    description: str
    base_minutes: int
    dependencies: tuple[str, ...]
    scales_with_size: bool = False


# Linear chain: each step depends on the one before it
PLAN_BLUEPRINT: tuple[StepBlueprint, ...] = (
    StepBlueprint(
        id="organization_setup",
        description="Create the organization and its base settings",
        base_minutes=30,
        dependencies=(),
    ),
    StepBlueprint(
        id="coa_import",
        description="Import the generated chart of accounts",
        base_minutes=60,
        dependencies=("organization_setup",),
        scales_with_size=True,
    ),
    StepBlueprint(
        id="posting_rules_setup",
        description="Configure posting rules and smart-code mappings",
        base_minutes=45,
        dependencies=("coa_import",),
    ),
    StepBlueprint(
        id="transaction_testing",
        description="Post sample transactions and reconcile the results",
        base_minutes=120,
        dependencies=("posting_rules_setup",),
        scales_with_size=True,
    ),
    StepBlueprint(
        id="user_training",
        description="Train staff on recording transactions and reading reports",
        base_minutes=90,
        dependencies=("transaction_testing",),
        scales_with_size=True,
    ),
    StepBlueprint(
        id="go_live",
        description="Switch to live operation",
        base_minutes=15,
        dependencies=("user_training",),
    ),
)


class ImplementationPlanner:
    """Builds the rollout plan for a business size."""

    def __init__(self, settings: Optional[CompilerSettings] = None):
        self._settings = settings or get_settings()

    def plan(self, business_size: BusinessSize) -> tuple[ImplementationStep, ...]:
        multiplier = 1.0
        if business_size == BusinessSize.LARGE:
            multiplier = self._settings.large_business_time_multiplier

        return tuple(
            ImplementationStep(
                id=blueprint.id,
                description=blueprint.description,
                estimated_minutes=(
                    math.ceil(blueprint.base_minutes * multiplier)
                    if blueprint.scales_with_size
                    else blueprint.base_minutes
                ),
                dependencies=blueprint.dependencies,
            )
            for blueprint in PLAN_BLUEPRINT
        )


def total_estimated_minutes(plan: Iterable[ImplementationStep]) -> int:
    return sum(step.estimated_minutes for step in plan)


def topological_order(plan: Iterable[ImplementationStep]) -> list[str]:
    """
    Order step ids so every step follows its dependencies.

    Raises:
        ValueError: If a dependency is unknown
        graphlib.CycleError: If the steps form a cycle
    """
    steps = {step.id: step for step in plan}
    for step in steps.values():
        for dependency in step.dependencies:
            if dependency not in steps:
                raise ValueError(f"Step {step.id} depends on unknown step {dependency}")

    sorter = TopologicalSorter({step_id: step.dependencies for step_id, step in steps.items()})
    return list(sorter.static_order())
