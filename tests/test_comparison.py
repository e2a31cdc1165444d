"""Tests for comparing two charts of accounts."""

import pytest

from coa_compiler.comparison import (
    DifferenceType,
    MigrationAction,
    MigrationComplexity,
    compare_coas,
)
from coa_compiler.models.coa import Account


def _account(code, name="Account", account_type="assets"):
    return Account(code=code, name=name, type=account_type)


class TestCompareCOAs:
    """Tests for compare_coas."""

    def test_identical(self):
        """Test that equal lists have no differences."""
        accounts = [_account("1100000", "Cash"), _account("4100000", "Sales", "revenue")]
        comparison = compare_coas(accounts, accounts)
        assert comparison.is_identical
        assert comparison.similarity_score == 1.0
        assert comparison.migration_complexity == MigrationComplexity.LOW
        assert comparison.migration_steps == ()

    def test_both_empty(self):
        """Test that two empty charts are identical."""
        assert compare_coas([], []).similarity_score == 1.0

    def test_difference_types(self):
        """Test missing, extra and modified accounts."""
        current = [_account("1100000", "Cash"), _account("1200000", "Receivables"), _account("1300000", "Stock")]
        target = [_account("1100000", "Cash"), _account("1300000", "Inventory"), _account("1400000", "Prepaid")]
        comparison = compare_coas(current, target)

        by_code = {d.account_code: d for d in comparison.differences}
        assert by_code["1200000"].type == DifferenceType.EXTRA
        assert by_code["1400000"].type == DifferenceType.MISSING
        assert by_code["1300000"].type == DifferenceType.MODIFIED
        assert by_code["1300000"].changed_fields == ("name",)
        assert "1100000" not in by_code
        assert comparison.similarity_score == pytest.approx(2 / 4)

    def test_migration_step_order(self):
        """Test that creates come before modifies and retires come last."""
        current = [_account("1200000"), _account("1300000", "Stock")]
        target = [_account("1300000", "Inventory"), _account("1400000")]
        steps = compare_coas(current, target).migration_steps
        assert [(s.order, s.action, s.account_code) for s in steps] == [
            (1, MigrationAction.CREATE, "1400000"),
            (2, MigrationAction.MODIFY, "1300000"),
            (3, MigrationAction.RETIRE, "1200000"),
        ]

    def test_type_change_is_modification(self):
        """Test that a changed type alone counts as a modification."""
        current = [_account("2600000", "Retainers", "liabilities")]
        target = [_account("2600000", "Retainers", "revenue")]
        difference = compare_coas(current, target).differences[0]
        assert difference.changed_fields == ("type",)

    @pytest.mark.parametrize("count,expected", [
        (5, MigrationComplexity.LOW),
        (6, MigrationComplexity.MEDIUM),
        (20, MigrationComplexity.MEDIUM),
        (21, MigrationComplexity.HIGH),
    ])
    def test_complexity(self, count, expected):
        """Test complexity thresholds by number of differences."""
        target = [_account(f"1{i:06d}") for i in range(count)]
        assert compare_coas([], target).migration_complexity == expected

    def test_compare_generated_coas(self, compiler):
        """Test comparing two compiled industries."""
        restaurant = compiler.quick_setup_coa("Joe's Diner", "restaurant")
        retail = compiler.quick_setup_coa("Joe's Shop", "retail")
        comparison = compare_coas(
            restaurant.coa_structure.final_accounts,
            retail.coa_structure.final_accounts,
        )
        by_code = {d.account_code: d for d in comparison.differences}
        assert by_code["4100000"].type == DifferenceType.MODIFIED
        assert by_code["1310000"].type == DifferenceType.EXTRA
        assert by_code["4190000"].type == DifferenceType.MISSING
        assert 0.0 < comparison.similarity_score < 1.0
