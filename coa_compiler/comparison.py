"""
COA Comparison

Compares two charts of accounts (e.g. a business's current COA and a
freshly compiled one) and proposes migration steps.

Accounts are matched by code. A matching code with a different name,
type or normal balance is a modification.
"""

from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field

from coa_compiler.models.coa import Account


class DifferenceType(str, Enum):
    MISSING = "missing"    # In target only
    EXTRA = "extra"        # In current only
    MODIFIED = "modified"  # Same code, different definition


class MigrationComplexity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class MigrationAction(str, Enum):
    CREATE = "create"
    MODIFY = "modify"
    RETIRE = "retire"


class COADifference(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: DifferenceType
    account_code: str
    description: str
    changed_fields: tuple[str, ...] = Field(default_factory=tuple)


class MigrationStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    order: int = Field(..., ge=1)
    action: MigrationAction
    account_code: str
    description: str


class COAComparison(BaseModel):
    """Result of comparing a current COA with a target COA."""
    model_config = ConfigDict(frozen=True)

    differences: tuple[COADifference, ...]
    similarity_score: float = Field(..., ge=0.0, le=1.0)
    migration_complexity: MigrationComplexity
    migration_steps: tuple[MigrationStep, ...]

    @property
    def is_identical(self) -> bool:
        return not self.differences


COMPARED_FIELDS = ("name", "type", "normal_balance")

# Upper bounds on difference counts per complexity level
LOW_COMPLEXITY_MAX = 5
MEDIUM_COMPLEXITY_MAX = 20


def _changed_fields(current: Account, target: Account) -> tuple[str, ...]:
    return tuple(f for f in COMPARED_FIELDS if getattr(current, f) != getattr(target, f))


def _find_differences(
    current: dict[str, Account],
    target: dict[str, Account],
) -> list[COADifference]:
    differences = []
    for code in sorted(set(current) | set(target)):
        old: Optional[Account] = current.get(code)
        new: Optional[Account] = target.get(code)
        if old is None:
            differences.append(COADifference(
                type=DifferenceType.MISSING,
                account_code=code,
                description=f"{new.name} is not in the current COA",
            ))
        elif new is None:
            differences.append(COADifference(
                type=DifferenceType.EXTRA,
                account_code=code,
                description=f"{old.name} is not in the target COA",
            ))
        else:
            changed = _changed_fields(old, new)
            if changed:
                differences.append(COADifference(
                    type=DifferenceType.MODIFIED,
                    account_code=code,
                    description=f"{old.name} differs in {', '.join(changed)}",
                    changed_fields=changed,
                ))
    return differences


def _similarity(current: dict[str, Account], target: dict[str, Account]) -> float:
    """Jaccard similarity of the two code sets."""
    union = set(current) | set(target)
    if not union:
        return 1.0
    return len(set(current) & set(target)) / len(union)


def _complexity(difference_count: int) -> MigrationComplexity:
    if difference_count <= LOW_COMPLEXITY_MAX:
        return MigrationComplexity.LOW
    if difference_count <= MEDIUM_COMPLEXITY_MAX:
        return MigrationComplexity.MEDIUM
    return MigrationComplexity.HIGH


def _migration_steps(
    differences: list[COADifference],
    target: dict[str, Account],
) -> list[MigrationStep]:
    """Create new accounts first, then modify, then retire old ones."""
    phases = (
        (DifferenceType.MISSING, MigrationAction.CREATE),
        (DifferenceType.MODIFIED, MigrationAction.MODIFY),
        (DifferenceType.EXTRA, MigrationAction.RETIRE),
    )
    steps = []
    for difference_type, action in phases:
        for difference in differences:
            if difference.type != difference_type:
                continue
            if action == MigrationAction.CREATE:
                description = f"Create {difference.account_code} {target[difference.account_code].name}"
            elif action == MigrationAction.MODIFY:
                description = f"Update {', '.join(difference.changed_fields)} of {difference.account_code}"
            else:
                description = f"Retire {difference.account_code} after moving its balance"
            steps.append(MigrationStep(
                order=len(steps) + 1,
                action=action,
                account_code=difference.account_code,
                description=description,
            ))
    return steps


def compare_coas(
    current: Iterable[Account],
    target: Iterable[Account],
) -> COAComparison:
    """Compare two account lists keyed by code."""
    current_by_code = {account.code: account for account in current}
    target_by_code = {account.code: account for account in target}

    differences = _find_differences(current_by_code, target_by_code)

    return COAComparison(
        differences=tuple(differences),
        similarity_score=_similarity(current_by_code, target_by_code),
        migration_complexity=_complexity(len(differences)),
        migration_steps=tuple(_migration_steps(differences, target_by_code)),
    )
