from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator
from typing import List, Optional, Dict, Any
from datetime import datetime, timezone
from uuid import uuid4


# Upper bound on a single expense keeps group sums finite
MAX_EXPENSE_AMOUNT = 1_000_000_000.0


def _new_id() -> str:
    return uuid4().hex


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _clean_name(value: str, label: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(f"{label} must not be blank")
    return value


def _unique_names(names: List[str]) -> List[str]:
    """Strip names and drop repeats, keeping the first occurrence"""
    seen = []
    for name in names:
        name = _clean_name(name, "member name")
        if name not in seen:
            seen.append(name)
    return seen


class Expense(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str
    amount: float = Field(..., gt=0, le=MAX_EXPENSE_AMOUNT, allow_inf_nan=False)
    paid_by: str
    split_between: List[str] = Field(default_factory=list)
    date: datetime = Field(default_factory=_now)

    @field_validator("name")
    @classmethod
    def check_name(cls, value):
        return _clean_name(value, "expense name")

    @field_validator("paid_by")
    @classmethod
    def check_paid_by(cls, value):
        return _clean_name(value, "paid_by")

    @field_validator("split_between")
    @classmethod
    def check_split_between(cls, value):
        return _unique_names(value)

    @computed_field
    @property
    def per_person_amount(self) -> Optional[float]:
        if not self.split_between:
            return None
        return self.amount / len(self.split_between)


class Group(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str
    members: List[str] = Field(..., min_length=1)
    expenses: List[Expense] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_now)

    @field_validator("name")
    @classmethod
    def check_name(cls, value):
        return _clean_name(value, "group name")

    @field_validator("members")
    @classmethod
    def check_members(cls, value):
        members = [_clean_name(name, "member name") for name in value]
        if len(set(members)) != len(members):
            raise ValueError("member names must be unique")
        return members

    @model_validator(mode="after")
    def check_expense_members(self):
        """Every payer and split member must belong to the group"""
        # Copy rather than mutate: callers may share Expense instances
        self.expenses = [
            e if e.split_between else e.model_copy(update={"split_between": list(self.members)})
            for e in self.expenses
        ]
        for expense in self.expenses:
            if expense.paid_by not in self.members:
                raise ValueError(f"Expense '{expense.name}' is paid by non-member {expense.paid_by}")
            unknown = [m for m in expense.split_between if m not in self.members]
            if unknown:
                raise ValueError(f"Expense '{expense.name}' is split with non-members: {', '.join(unknown)}")
        return self

    @computed_field
    @property
    def total_expenses(self) -> float:
        return sum(expense.amount for expense in self.expenses)


class Transfer(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_member: str = Field(..., alias="from")
    to_member: str = Field(..., alias="to")
    amount: float = Field(..., gt=0, allow_inf_nan=False)


class SettlementResult(BaseModel):
    group_id: str
    balances: Dict[str, float]
    transfers: List[Transfer]
    settled: bool


# ===== REQUEST / RESPONSE BODIES =====
class GroupCreate(BaseModel):
    name: str = Field(..., description="Name of the group")
    members: List[str] = Field(..., min_length=1, description="Member names, unique within the group")


class GroupUpdate(BaseModel):
    name: str = Field(..., description="New name of the group")
    members: List[str] = Field(..., min_length=1, description="Full member list after the edit")


class ExpenseCreate(BaseModel):
    name: str = Field(..., description="Description of the expense")
    amount: float = Field(
        ..., gt=0, le=MAX_EXPENSE_AMOUNT, allow_inf_nan=False, description="Amount of the expense"
    )
    paid_by: str = Field(..., description="Member who paid the expense")
    split_between: Optional[List[str]] = Field(None, description="Members sharing the cost; defaults to everyone")
    date: Optional[datetime] = Field(None, description="When the expense happened; defaults to now")


class ShareResponse(BaseModel):
    text: str
    group: Dict[str, Any]
