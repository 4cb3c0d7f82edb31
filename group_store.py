"""
In-memory group repository.

Owns the groups and their expenses and performs every mutation. Each
mutation builds a fresh, validated ``Group`` so the settlement engine
always receives a snapshot that satisfies the membership invariants.
"""
from datetime import datetime
from typing import Dict, List, Optional, Tuple
import logging

from pydantic import ValidationError

from exceptions import (
    ExpenseNotFoundError,
    GroupNotFoundError,
    InvalidExpenseError,
    InvalidGroupError,
)
from models import Expense, Group

logger = logging.getLogger(__name__)


def _first_error(exc: ValidationError) -> str:
    error = exc.errors()[0]
    return error.get("msg", str(exc))


def repair_expenses(expenses: List[Expense], members: List[str]) -> List[Expense]:
    """
    Rewrite expenses after a membership change.

    A payer who left is replaced by the first remaining member, split
    lists drop departed members, and a split left empty falls back to
    the whole new member list.
    """
    repaired = []
    for expense in expenses:
        paid_by = expense.paid_by
        if paid_by not in members:
            logger.warning(f"Expense {expense.id}: payer {paid_by} removed, reassigned to {members[0]}")
            paid_by = members[0]

        split_between = [m for m in expense.split_between if m in members]
        if not split_between:
            split_between = list(members)

        repaired.append(expense.model_copy(update={"paid_by": paid_by, "split_between": split_between}))
    return repaired


class GroupStore:
    def __init__(self):
        self._groups: Dict[str, Group] = {}

    def _build_group(self, **fields) -> Group:
        try:
            return Group(**fields)
        except ValidationError as e:
            raise InvalidGroupError(_first_error(e))

    def _replace_expenses(self, group: Group, expenses: List[Expense]) -> Group:
        try:
            updated = Group(
                id=group.id,
                name=group.name,
                members=group.members,
                expenses=expenses,
                created_at=group.created_at,
            )
        except ValidationError as e:
            raise InvalidExpenseError(_first_error(e))
        self._groups[group.id] = updated
        return updated

    # ----- groups -----

    def create_group(self, name: str, members: List[str]) -> Group:
        group = self._build_group(name=name, members=members)
        self._groups[group.id] = group
        logger.info(f"Created group {group.id} '{group.name}' with {len(group.members)} members")
        return group.model_copy(deep=True)

    def get_group(self, group_id: str) -> Group:
        """Return a copy; changes only reach the store through its methods"""
        if group_id not in self._groups:
            raise GroupNotFoundError(f"Group {group_id} not found")
        return self._groups[group_id].model_copy(deep=True)

    def list_groups(self) -> List[Group]:
        return [group.model_copy(deep=True) for group in self._groups.values()]

    def update_group(self, group_id: str, name: str, members: List[str]) -> Group:
        """Rename a group and replace its member list, repairing expenses"""
        group = self.get_group(group_id)

        # Validate the new member list before touching any expense
        checked = self._build_group(id=group.id, name=name, members=members)
        expenses = repair_expenses(group.expenses, checked.members)

        updated = self._build_group(
            id=group.id,
            name=checked.name,
            members=checked.members,
            expenses=expenses,
            created_at=group.created_at,
        )
        self._groups[group_id] = updated
        logger.info(f"Updated group {group_id}: {len(updated.members)} members, {len(updated.expenses)} expenses")
        return updated.model_copy(deep=True)

    def delete_group(self, group_id: str):
        self.get_group(group_id)
        del self._groups[group_id]
        logger.info(f"Deleted group {group_id}")

    # ----- expenses -----

    def _make_expense(self, group: Group, **fields) -> Expense:
        if not fields.get("split_between"):
            fields["split_between"] = list(group.members)
        if fields.get("date") is None:
            fields.pop("date", None)
        try:
            return Expense(**fields)
        except ValidationError as e:
            raise InvalidExpenseError(_first_error(e))

    def get_expense(self, group_id: str, expense_id: str) -> Expense:
        group = self.get_group(group_id)
        for expense in group.expenses:
            if expense.id == expense_id:
                return expense
        raise ExpenseNotFoundError(f"Expense {expense_id} not found in group {group_id}")

    def add_expense(
        self,
        group_id: str,
        name: str,
        amount: float,
        paid_by: str,
        split_between: Optional[List[str]] = None,
        date: Optional[datetime] = None,
    ) -> Expense:
        group = self.get_group(group_id)
        expense = self._make_expense(
            group, name=name, amount=amount, paid_by=paid_by, split_between=split_between, date=date
        )
        self._replace_expenses(group, group.expenses + [expense])
        logger.info(f"Group {group_id}: added expense {expense.id} '{expense.name}' {expense.amount:.2f} paid by {expense.paid_by}")
        return expense.model_copy(deep=True)

    def update_expense(
        self,
        group_id: str,
        expense_id: str,
        name: str,
        amount: float,
        paid_by: str,
        split_between: Optional[List[str]] = None,
        date: Optional[datetime] = None,
    ) -> Expense:
        """Replace an expense's fields, keeping its id and (unless given) its date"""
        current = self.get_expense(group_id, expense_id)
        group = self.get_group(group_id)

        expense = self._make_expense(
            group,
            id=current.id,
            name=name,
            amount=amount,
            paid_by=paid_by,
            split_between=split_between,
            date=date or current.date,
        )
        expenses = [expense if e.id == expense_id else e for e in group.expenses]
        self._replace_expenses(group, expenses)
        logger.info(f"Group {group_id}: updated expense {expense_id}")
        return expense.model_copy(deep=True)

    def delete_expense(self, group_id: str, expense_id: str):
        self.get_expense(group_id, expense_id)
        group = self.get_group(group_id)
        self._replace_expenses(group, [e for e in group.expenses if e.id != expense_id])
        logger.info(f"Group {group_id}: deleted expense {expense_id}")

    # ----- sharing -----

    def export_group(self, group_id: str) -> dict:
        """JSON-ready snapshot of a group, suitable for import_group"""
        return self.get_group(group_id).model_dump(mode="json")

    def import_group(self, data: dict) -> Tuple[Group, bool]:
        """
        Add a shared group snapshot.

        Returns the stored group and whether it was newly added. A group
        whose id already exists is left untouched.
        """
        group = self._build_group(**data)
        if group.id in self._groups:
            logger.warning(f"Group {group.id} '{group.name}' already exists, import skipped")
            return self._groups[group.id].model_copy(deep=True), False

        self._groups[group.id] = group
        logger.info(f"Imported shared group {group.id} '{group.name}'")
        return group.model_copy(deep=True), True
