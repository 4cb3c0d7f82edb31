from datetime import datetime, timezone

import pytest

from exceptions import (
    ExpenseNotFoundError,
    GroupNotFoundError,
    InvalidExpenseError,
    InvalidGroupError,
)
from group_store import GroupStore
from settlement_optimizer import compute_settlements


class TestGroups:
    def test_create_and_get(self, store, trip):
        assert store.get_group(trip.id) == trip
        assert store.list_groups() == [trip]

    def test_create_rejects_duplicate_members(self, store):
        with pytest.raises(InvalidGroupError):
            store.create_group("Flat", ["A", "A"])

    def test_unknown_group(self, store):
        with pytest.raises(GroupNotFoundError):
            store.get_group("missing")

    def test_delete(self, store, trip):
        store.delete_group(trip.id)

        assert store.list_groups() == []
        with pytest.raises(GroupNotFoundError):
            store.delete_group(trip.id)

    def test_rename_keeps_expenses(self, store, trip):
        store.add_expense(trip.id, "Hotel", 300, "Asha")

        updated = store.update_group(trip.id, "Goa 2024", ["Asha", "Ben", "Chen"])

        assert updated.name == "Goa 2024"
        assert updated.created_at == trip.created_at
        assert len(updated.expenses) == 1


class TestMemberRemovalRepair:
    def test_removed_payer_is_reassigned_to_first_member(self, store, trip):
        store.add_expense(trip.id, "Taxi", 60, "Chen", ["Asha", "Chen"])

        updated = store.update_group(trip.id, trip.name, ["Ben", "Asha"])

        expense = updated.expenses[0]
        assert expense.paid_by == "Ben"
        assert expense.split_between == ["Asha"]
        assert expense.per_person_amount == 60.0

    def test_emptied_split_falls_back_to_new_members(self, store, trip):
        store.add_expense(trip.id, "Snacks", 30, "Asha", ["Chen"])

        updated = store.update_group(trip.id, trip.name, ["Asha", "Ben"])

        assert updated.expenses[0].split_between == ["Asha", "Ben"]
        assert updated.expenses[0].per_person_amount == 15.0

    def test_repaired_group_still_settles(self, store, trip):
        store.add_expense(trip.id, "Hotel", 90, "Asha")
        store.add_expense(trip.id, "Taxi", 30, "Chen", ["Chen"])

        updated = store.update_group(trip.id, trip.name, ["Asha", "Ben"])
        result = compute_settlements(updated)

        # Taxi moves to Asha and is shared by both remaining members
        assert result.balances == {"Asha": 60.0, "Ben": -60.0}
        assert [(t.from_member, t.to_member, t.amount) for t in result.transfers] == [("Ben", "Asha", 60.0)]

    def test_invalid_members_leave_group_untouched(self, store, trip):
        with pytest.raises(InvalidGroupError):
            store.update_group(trip.id, trip.name, [])

        assert store.get_group(trip.id).members == ["Asha", "Ben", "Chen"]


class TestExpenses:
    def test_add_defaults_split_to_everyone(self, store, trip):
        expense = store.add_expense(trip.id, "Hotel", 300, "Asha")

        assert expense.split_between == ["Asha", "Ben", "Chen"]
        assert store.get_group(trip.id).total_expenses == 300

    def test_add_rejects_non_member(self, store, trip):
        with pytest.raises(InvalidExpenseError, match="non-member"):
            store.add_expense(trip.id, "Hotel", 300, "Zed")
        with pytest.raises(InvalidExpenseError, match="Zed"):
            store.add_expense(trip.id, "Hotel", 300, "Asha", ["Asha", "Zed"])

        assert store.get_group(trip.id).expenses == []

    def test_add_rejects_bad_amount(self, store, trip):
        with pytest.raises(InvalidExpenseError):
            store.add_expense(trip.id, "Hotel", 0, "Asha")

    def test_update_keeps_id_and_date(self, store, trip):
        date = datetime(2024, 3, 1, tzinfo=timezone.utc)
        expense = store.add_expense(trip.id, "Hotel", 300, "Asha", date=date)

        updated = store.update_expense(trip.id, expense.id, "Hotel (2 nights)", 450, "Ben", ["Ben", "Chen"])

        assert updated.id == expense.id
        assert updated.date == date
        assert store.get_group(trip.id).expenses == [updated]
        assert store.get_group(trip.id).total_expenses == 450

    def test_update_unknown_expense(self, store, trip):
        with pytest.raises(ExpenseNotFoundError):
            store.update_expense(trip.id, "nope", "Hotel", 10, "Asha")

    def test_delete(self, store, trip):
        first = store.add_expense(trip.id, "Hotel", 300, "Asha")
        second = store.add_expense(trip.id, "Dinner", 60, "Ben")

        store.delete_expense(trip.id, first.id)

        assert store.get_group(trip.id).expenses == [second]
        with pytest.raises(ExpenseNotFoundError):
            store.delete_expense(trip.id, first.id)

    def test_snapshots_are_independent(self, store, trip):
        before = store.get_group(trip.id)

        store.add_expense(trip.id, "Hotel", 300, "Asha")

        assert before.expenses == []

    def test_returned_groups_are_copies(self, store, trip):
        store.add_expense(trip.id, "Hotel", 300, "Asha")

        group = store.get_group(trip.id)
        group.expenses.append(group.expenses[0])
        group.expenses[0].split_between.append("Zed")
        store.list_groups()[0].members.append("Zed")

        stored = store.get_group(trip.id)
        assert len(stored.expenses) == 1
        assert stored.expenses[0].split_between == ["Asha", "Ben", "Chen"]
        assert stored.members == ["Asha", "Ben", "Chen"]

    def test_returned_expense_is_a_copy(self, store, trip):
        expense = store.add_expense(trip.id, "Hotel", 300, "Asha")

        expense.split_between.clear()

        assert store.get_group(trip.id).expenses[0].split_between == ["Asha", "Ben", "Chen"]


class TestSharing:
    def test_export_then_import_elsewhere(self, store, trip):
        store.add_expense(trip.id, "Hotel", 300, "Asha", ["Asha", "Ben"])
        other = GroupStore()

        group, created = other.import_group(store.export_group(trip.id))

        assert created is True
        assert group == store.get_group(trip.id)

    def test_import_existing_group_is_skipped(self, store, trip):
        snapshot = store.export_group(trip.id)
        store.add_expense(trip.id, "Hotel", 300, "Asha")

        group, created = store.import_group(snapshot)

        assert created is False
        assert len(group.expenses) == 1

    def test_import_invalid_snapshot(self, store):
        with pytest.raises(InvalidGroupError):
            store.import_group({"name": "Broken", "members": ["A"], "expenses": [
                {"name": "Taxi", "amount": 10, "paid_by": "B"},
            ]})
