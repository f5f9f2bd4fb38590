"""Domain tests for the chart-of-accounts registry."""

from dataclasses import replace
from decimal import Decimal

import pytest

from ledgerkit.domain.account import build_hierarchy
from ledgerkit.domain.entities import AccountStatus, AccountType
from ledgerkit.domain.errors import (
    AccountHasTransactionsError,
    AccountNotFoundError,
    AccountTypeLockedError,
    CyclicParentError,
    DependencyError,
    DuplicateCodeError,
    ImportedAccountError,
    InvalidParentTypeError,
    MissingColumnsError,
    ValidationError,
)


class TestCreateAccount:
    def test_create_root_account(self, registry):
        account = registry.create_account("1110", "Cash", "asset", description="Cash on hand")

        assert account.code == "1110"
        assert account.name == "Cash"
        assert account.type is AccountType.ASSET
        assert account.parent_id is None
        assert account.balance == Decimal("0")
        assert account.status is AccountStatus.ACTIVE
        assert account.is_imported is False
        assert account.description == "Cash on hand"

    def test_create_with_parent_and_balance(self, registry):
        parent = registry.create_account("1000", "Assets", AccountType.ASSET)
        child = registry.create_account(
            "1100", "Current Assets", AccountType.ASSET, parent_id=parent.id, initial_balance="250.50"
        )

        assert child.parent_id == parent.id
        assert child.balance == Decimal("250.50")

    def test_duplicate_code_rejected_case_insensitive(self, registry):
        registry.create_account("A-100", "Bank", AccountType.ASSET)

        with pytest.raises(DuplicateCodeError):
            registry.create_account("a-100", "Other Bank", AccountType.ASSET)

    def test_parent_of_other_type_rejected(self, registry):
        parent = registry.create_account("1000", "Assets", AccountType.ASSET)

        with pytest.raises(InvalidParentTypeError):
            registry.create_account("4000", "Revenue", AccountType.REVENUE, parent_id=parent.id)

    def test_missing_parent_rejected(self, registry):
        with pytest.raises(AccountNotFoundError):
            registry.create_account("1000", "Assets", AccountType.ASSET, parent_id=999)

    @pytest.mark.parametrize("code", ["", "11 10", "1110/2", "X" * 21])
    def test_invalid_code_rejected(self, registry, code):
        with pytest.raises(ValidationError):
            registry.create_account(code, "Cash", AccountType.ASSET)

    def test_short_name_rejected(self, registry):
        with pytest.raises(ValidationError):
            registry.create_account("1110", "C", AccountType.ASSET)

    def test_unknown_type_rejected(self, registry):
        with pytest.raises(ValidationError):
            registry.create_account("1110", "Cash", "goodwill")


class TestUpdateAccount:
    def test_update_name_and_description(self, registry):
        account = registry.create_account("1110", "Cash", AccountType.ASSET)

        updated = registry.update_account(account.id, name="Cash on Hand", description="Drawer")

        assert updated.name == "Cash on Hand"
        assert updated.description == "Drawer"
        assert updated.code == "1110"

    def test_update_not_found(self, registry):
        with pytest.raises(AccountNotFoundError):
            registry.update_account(42, name="Missing")

    def test_update_code_to_existing_code_rejected(self, registry):
        registry.create_account("1110", "Cash", AccountType.ASSET)
        bank = registry.create_account("1120", "Bank", AccountType.ASSET)

        with pytest.raises(DuplicateCodeError):
            registry.update_account(bank.id, code="1110")

    def test_update_code_keeping_own_code(self, registry):
        cash = registry.create_account("1110", "Cash", AccountType.ASSET)

        updated = registry.update_account(cash.id, code="1110", name="Petty Cash")

        assert updated.code == "1110"
        assert updated.name == "Petty Cash"

    def test_reparent_and_clear_parent(self, registry):
        root = registry.create_account("1000", "Assets", AccountType.ASSET)
        cash = registry.create_account("1110", "Cash", AccountType.ASSET)

        moved = registry.update_account(cash.id, parent_id=root.id)
        assert moved.parent_id == root.id

        cleared = registry.update_account(cash.id, clear_parent=True)
        assert cleared.parent_id is None

    def test_self_parent_rejected(self, registry):
        cash = registry.create_account("1110", "Cash", AccountType.ASSET)

        with pytest.raises(CyclicParentError):
            registry.update_account(cash.id, parent_id=cash.id)

    def test_descendant_parent_rejected(self, registry):
        root = registry.create_account("1000", "Assets", AccountType.ASSET)
        mid = registry.create_account("1100", "Current", AccountType.ASSET, parent_id=root.id)
        leaf = registry.create_account("1110", "Cash", AccountType.ASSET, parent_id=mid.id)

        with pytest.raises(CyclicParentError):
            registry.update_account(root.id, parent_id=leaf.id)

        # Nothing changed
        assert registry.get_account(root.id).parent_id is None

    def test_no_account_is_its_own_ancestor(self, registry):
        root = registry.create_account("1000", "Assets", AccountType.ASSET)
        mid = registry.create_account("1100", "Current", AccountType.ASSET, parent_id=root.id)
        registry.create_account("1110", "Cash", AccountType.ASSET, parent_id=mid.id)
        with pytest.raises(CyclicParentError):
            registry.update_account(mid.id, parent_id=mid.id)

        accounts = {acc.id: acc for acc in registry.list_accounts()}
        for acc in accounts.values():
            seen = set()
            current = acc
            while current is not None:
                assert current.id not in seen
                seen.add(current.id)
                current = accounts.get(current.parent_id)

    def test_type_change_without_postings(self, registry):
        account = registry.create_account("1110", "Cash", AccountType.ASSET)

        updated = registry.update_account(account.id, account_type="expense")

        assert updated.type is AccountType.EXPENSE

    def test_type_change_after_postings_rejected(self, registry, poster, chart):
        poster.post(chart["cash"].id, chart["sales"].id, Decimal("10"))

        with pytest.raises(AccountTypeLockedError):
            registry.update_account(chart["cash"].id, account_type=AccountType.EXPENSE)

    def test_type_change_conflicting_with_parent_rejected(self, registry):
        root = registry.create_account("1000", "Assets", AccountType.ASSET)
        cash = registry.create_account("1110", "Cash", AccountType.ASSET, parent_id=root.id)

        with pytest.raises(InvalidParentTypeError):
            registry.update_account(cash.id, account_type=AccountType.EXPENSE)

    def test_both_parent_and_clear_parent_rejected(self, registry):
        root = registry.create_account("1000", "Assets", AccountType.ASSET)
        cash = registry.create_account("1110", "Cash", AccountType.ASSET)

        with pytest.raises(ValidationError):
            registry.update_account(cash.id, parent_id=root.id, clear_parent=True)

    def test_clear_description(self, registry):
        cash = registry.create_account("1110", "Cash", AccountType.ASSET, description="Drawer")

        kept = registry.update_account(cash.id, description="")
        assert kept.description == "Drawer"

        cleared = registry.update_account(cash.id, clear_description=True)
        assert cleared.description is None

    def test_both_description_and_clear_description_rejected(self, registry):
        cash = registry.create_account("1110", "Cash", AccountType.ASSET, description="Drawer")

        with pytest.raises(ValidationError):
            registry.update_account(cash.id, description="Till", clear_description=True)


class TestDeleteAccount:
    def test_delete_plain_account(self, registry):
        account = registry.create_account("1110", "Cash", AccountType.ASSET)

        registry.delete_account(account.id)

        assert registry.get_account(account.id) is None

    def test_delete_not_found(self, registry):
        with pytest.raises(AccountNotFoundError):
            registry.delete_account(7)

    def test_delete_with_transactions_blocked(self, registry, poster, chart):
        poster.post(chart["cash"].id, chart["sales"].id, Decimal("500"))

        with pytest.raises(AccountHasTransactionsError):
            registry.delete_account(chart["sales"].id)

    def test_delete_with_void_transactions_still_blocked(self, registry, poster, chart):
        txn = poster.post(chart["cash"].id, chart["sales"].id, Decimal("500"))
        poster.void(txn.id)

        with pytest.raises(AccountHasTransactionsError):
            registry.delete_account(chart["cash"].id)

    def test_delete_imported_blocked(self, registry):
        registry.bulk_import([{"code": "1000", "name": "Assets", "type": "Assets"}])
        imported = registry.get_account_by_code("1000")

        with pytest.raises(ImportedAccountError):
            registry.delete_account(imported.id)

    def test_imported_check_precedes_transaction_check(self, registry, poster):
        registry.bulk_import(
            [
                {"code": "1110", "name": "Cash", "type": "asset"},
                {"code": "4100", "name": "Sales", "type": "revenue"},
            ]
        )
        cash = registry.get_account_by_code("1110")
        sales = registry.get_account_by_code("4100")
        poster.post(cash.id, sales.id, Decimal("5"))

        with pytest.raises(ImportedAccountError):
            registry.delete_account(cash.id)

    def test_delete_parent_moves_children_to_root(self, registry):
        parent = registry.create_account("1000", "Assets", AccountType.ASSET)
        child = registry.create_account("1100", "Current", AccountType.ASSET, parent_id=parent.id)

        registry.delete_account(parent.id)

        assert registry.get_account(child.id).parent_id is None

    def test_integrity_errors_share_category(self, registry):
        registry.bulk_import([{"code": "1000", "name": "Assets", "type": "Assets"}])
        with pytest.raises(DependencyError):
            registry.delete_account(registry.get_account_by_code("1000").id)


class TestListAndStatus:
    def test_list_filters(self, registry, chart):
        assets = registry.list_accounts(account_type="asset")
        assert [acc.code for acc in assets] == ["1110"]

        found = registry.list_accounts(search="pay")
        assert [acc.code for acc in found] == ["2110"]

        all_codes = [acc.code for acc in registry.list_accounts()]
        assert all_codes == sorted(all_codes)

    def test_set_status(self, registry, chart):
        updated = registry.set_status(
            [chart["cash"].id, chart["sales"].id], AccountStatus.INACTIVE
        )

        assert all(acc.status is AccountStatus.INACTIVE for acc in updated)
        inactive = registry.list_accounts(status=AccountStatus.INACTIVE)
        assert {acc.code for acc in inactive} == {"1110", "4100"}

    def test_set_status_unknown_account_changes_nothing(self, registry, chart):
        with pytest.raises(AccountNotFoundError):
            registry.set_status([chart["cash"].id, 999], AccountStatus.INACTIVE)

        assert registry.get_account(chart["cash"].id).status is AccountStatus.ACTIVE


class TestBulkImport:
    def test_import_with_parent_in_same_batch(self, registry):
        rows = [
            {"code": "1000", "name": "Assets", "type": "Assets"},
            {"code": "1100", "name": "Current Assets", "type": "Assets", "parentcode": "1000"},
        ]

        result = registry.bulk_import(rows)

        assert result.imported == 2
        assert result.skipped == []
        parent = registry.get_account_by_code("1000")
        child = registry.get_account_by_code("1100")
        assert child.parent_id == parent.id
        assert parent.is_imported and child.is_imported

    def test_reimport_skips_everything(self, registry):
        rows = [
            {"code": "1000", "name": "Assets", "type": "Assets"},
            {"code": "1100", "name": "Current Assets", "type": "Assets", "parentcode": "1000"},
        ]
        registry.bulk_import(rows)

        result = registry.bulk_import(rows)

        assert result.imported == 0
        assert result.skipped == ["1000", "1100"]
        assert len(registry.list_accounts()) == 2

    def test_duplicate_within_batch_case_insensitive(self, registry):
        rows = [
            {"code": "A-1", "name": "Bank", "type": "asset"},
            {"code": "a-1", "name": "Bank Again", "type": "asset"},
        ]

        result = registry.bulk_import(rows)

        assert result.imported == 1
        assert result.skipped == ["a-1"]

    def test_skips_existing_manual_account(self, registry):
        registry.create_account("1110", "Cash", AccountType.ASSET)

        result = registry.bulk_import([{"code": "1110", "name": "Cash", "type": "asset"}])

        assert result.imported == 0
        assert result.skipped == ["1110"]
        assert registry.get_account_by_code("1110").is_imported is False

    def test_unresolved_parent_creates_root(self, registry):
        result = registry.bulk_import(
            [{"code": "1100", "name": "Current", "type": "asset", "parentcode": "9999"}]
        )

        assert result.imported == 1
        assert registry.get_account_by_code("1100").parent_id is None

    def test_parent_of_other_type_is_linked_by_code(self, registry):
        revenue = registry.create_account("4000", "Revenue", AccountType.REVENUE)

        result = registry.bulk_import(
            [{"code": "1100", "name": "Current", "type": "asset", "parent_code": "4000"}]
        )

        assert result.imported == 1
        imported = registry.get_account_by_code("1100")
        assert imported.parent_id == revenue.id
        assert imported.type is AccountType.ASSET

        renamed = registry.update_account(imported.id, name="Current Items")
        assert renamed.parent_id == revenue.id

    def test_columns_are_case_insensitive_and_optional_fields_parsed(self, registry):
        registry.bulk_import(
            [
                {
                    "Code": "2110",
                    "NAME": "Accounts Payable",
                    "Type": "liabilities",
                    "Description": "Suppliers",
                    "Balance": "1,200.40",
                }
            ]
        )

        account = registry.get_account_by_code("2110")
        assert account.type is AccountType.LIABILITY
        assert account.balance == Decimal("1200.40")
        assert account.description == "Suppliers"

    def test_unknown_type_defaults_to_asset_and_bad_balance_to_zero(self, registry):
        registry.bulk_import([{"code": "9000", "name": "Misc", "type": "other", "balance": "abc"}])

        account = registry.get_account_by_code("9000")
        assert account.type is AccountType.ASSET
        assert account.balance == Decimal("0")

    def test_rows_missing_values_are_skipped(self, registry):
        result = registry.bulk_import(
            [
                {"code": "1000", "name": "", "type": "asset"},
                {"code": "", "name": "Nameless", "type": "asset"},
                {"code": "1100", "name": "Current", "type": "asset"},
            ]
        )

        assert result.imported == 1
        assert result.skipped == ["1000"]

    def test_missing_columns_raise(self, registry):
        with pytest.raises(MissingColumnsError) as excinfo:
            registry.bulk_import([{"code": "1000", "title": "Assets"}])

        assert "name" in str(excinfo.value)
        assert "type" in str(excinfo.value)
        assert registry.list_accounts() == []

    def test_empty_import(self, registry):
        result = registry.bulk_import([])

        assert result.imported == 0
        assert result.skipped == []


class TestHierarchy:
    def test_tree_sorted_with_levels(self, registry):
        root = registry.create_account("1000", "Assets", AccountType.ASSET)
        registry.create_account("1200", "Fixed", AccountType.ASSET, parent_id=root.id)
        current = registry.create_account("1100", "Current", AccountType.ASSET, parent_id=root.id)
        registry.create_account("1110", "Cash", AccountType.ASSET, parent_id=current.id)
        registry.create_account("2000", "Liabilities", AccountType.LIABILITY)

        tree = registry.build_hierarchy()

        assert [node.account.code for node in tree] == ["1000", "2000"]
        assets = tree[0]
        assert assets.level == 0
        assert [node.account.code for node in assets.children] == ["1100", "1200"]
        assert assets.children[0].level == 1
        assert assets.children[0].children[0].account.code == "1110"
        assert assets.children[0].children[0].level == 2

    def test_malformed_cycle_terminates(self, registry):
        a = registry.create_account("1000", "Alpha", AccountType.ASSET)
        b = registry.create_account("1100", "Beta", AccountType.ASSET)
        # Corrupt data that bypassed the registry
        accounts = [replace(a, parent_id=b.id), replace(b, parent_id=a.id)]

        tree = build_hierarchy(accounts)

        codes = []

        def walk(nodes):
            for node in nodes:
                codes.append(node.account.code)
                walk(node.children)

        walk(tree)
        assert sorted(codes) == ["1000", "1100"]

    def test_orphan_parent_becomes_root(self, registry):
        a = registry.create_account("1000", "Alpha", AccountType.ASSET)
        tree = build_hierarchy([replace(a, parent_id=12345)])

        assert len(tree) == 1
        assert tree[0].level == 0
