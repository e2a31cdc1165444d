"""
Posting-Rule Adaptation

Specializes generic posting rules for one industry and derives the
smart-code mappings a transaction-posting engine looks events up by.

GUARANTEES:
- Pure function of (rules, industry)
- Rules are never dropped or reordered
- Rules without a wildcard pass through unchanged
"""

from typing import Iterable

from coa_compiler.models.coa import (
    Industry,
    PostingRule,
    PostingType,
    SmartCodeMapping,
)
from coa_compiler.smart_codes import industry_short_code


WILDCARD = "*"


class PostingRuleAdapter:
    """Replaces wildcard segments with the industry short code."""

    def adapt(
        self,
        rules: Iterable[PostingRule],
        industry: Industry,
    ) -> tuple[PostingRule, ...]:
        short_code = industry_short_code(industry)
        return tuple(self._adapt_rule(rule, short_code) for rule in rules)

    @staticmethod
    def _adapt_rule(rule: PostingRule, short_code: str) -> PostingRule:
        if WILDCARD not in rule.pattern:
            return rule
        return rule.model_copy(
            update={"pattern": rule.pattern.replace(WILDCARD, short_code)}
        )


def build_smart_code_mappings(
    rules: Iterable[PostingRule],
    hints: Iterable[SmartCodeMapping] = (),
) -> tuple[SmartCodeMapping, ...]:
    """
    Flatten rules into (smart_code, account, side) mappings.

    Rule-derived mappings come first in rule order, debit side before
    credit; template hints follow. A mapping repeating an earlier smart code,
    account, side and condition set is dropped; the first one keeps its
    position.
    """
    mappings: list[SmartCodeMapping] = []
    seen: set[tuple] = set()

    def add(mapping: SmartCodeMapping) -> None:
        if mapping.key not in seen:
            seen.add(mapping.key)
            mappings.append(mapping)

    for rule in rules:
        smart_code = rule.smart_code or rule.pattern
        for posting_type, references in (
            (PostingType.DEBIT, rule.debit),
            (PostingType.CREDIT, rule.credit),
        ):
            for reference in references:
                add(SmartCodeMapping(
                    smart_code=smart_code,
                    account_code=reference.account_code,
                    posting_type=posting_type,
                    conditions=rule.conditions,
                ))

    for hint in hints:
        add(hint)

    return tuple(mappings)
