"""Tests for the trial balance and accounting-equation checks."""

from decimal import Decimal

from ledgerkit.domain.entities import AccountType
from ledgerkit.domain.reconciliation import is_balanced, totals, trial_balance


def test_trial_balance_after_sale(registry, poster, checker):
    cash = registry.create_account("1110", "Cash", AccountType.ASSET)
    sales = registry.create_account("4100", "Sales", AccountType.REVENUE)
    poster.post(cash.id, sales.id, Decimal("500"))

    rows = checker.trial_balance()

    assert [(r.code, r.debit, r.credit) for r in rows] == [
        ("1110", Decimal("500"), Decimal("0")),
        ("4100", Decimal("0"), Decimal("500")),
    ]
    assert checker.is_balanced(rows) is True


def test_negative_balance_goes_to_opposite_column(registry, checker):
    registry.create_account("1110", "Cash", AccountType.ASSET, initial_balance="-75")
    registry.create_account("2110", "Payable", AccountType.LIABILITY, initial_balance="-25")

    rows = {r.code: r for r in checker.trial_balance()}

    assert rows["1110"].debit == Decimal("0")
    assert rows["1110"].credit == Decimal("75")
    assert rows["2110"].debit == Decimal("25")
    assert rows["2110"].credit == Decimal("0")


def test_rows_sorted_by_code(registry, checker, chart):
    codes = [r.code for r in checker.trial_balance()]

    assert codes == ["1110", "2110", "3100", "4100", "5100"]


def test_unbalanced_opening_balances_detected(registry, checker):
    registry.create_account("1110", "Cash", AccountType.ASSET, initial_balance="100")

    rows = checker.trial_balance()

    assert totals(rows) == (Decimal("100"), Decimal("0"))
    assert checker.is_balanced(rows) is False


def test_tolerance(registry):
    cash = registry.create_account("1110", "Cash", AccountType.ASSET, initial_balance="10.00")
    equity = registry.create_account("3100", "Equity", AccountType.EQUITY, initial_balance="9.99")

    rows = trial_balance([cash, equity])

    assert is_balanced(rows) is False
    assert is_balanced(rows, tolerance=Decimal("0.02")) is True


def test_empty_trial_balance_is_balanced():
    assert trial_balance([]) == []
    assert is_balanced([]) is True


def test_postings_keep_balance(poster, checker, chart):
    poster.post(chart["cash"].id, chart["sales"].id, Decimal("500"))
    poster.post(chart["cogs"].id, chart["payable"].id, Decimal("150"))
    txn = poster.post(chart["payable"].id, chart["cash"].id, Decimal("300"))
    poster.void(txn.id)

    assert checker.is_balanced(checker.trial_balance())


class TestEquation:
    def test_balanced_chart(self, checker, chart):
        result = checker.verify_equation()

        assert result.balanced is True
        assert result.difference == Decimal("0")

    def test_holds_after_postings(self, poster, checker, chart):
        poster.post(chart["cash"].id, chart["sales"].id, Decimal("500"))
        poster.post(chart["cogs"].id, chart["cash"].id, Decimal("120"))

        result = checker.verify_equation()

        assert result.assets == Decimal("380")
        assert result.liabilities == Decimal("200")
        assert result.equity == Decimal("-200")
        assert result.net_income == Decimal("380")
        assert result.balanced is True

    def test_detects_imbalance(self, registry, checker):
        registry.create_account("1110", "Cash", AccountType.ASSET, initial_balance="50")

        result = checker.verify_equation()

        assert result.balanced is False
        assert result.difference == Decimal("50")
