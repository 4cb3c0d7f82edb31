from typing import List

from config import CURRENCY_SYMBOL, SHARE_RECENT_EXPENSES
from models import Group, SettlementResult, Transfer


def format_amount(amount: float, currency: str = CURRENCY_SYMBOL) -> str:
    return f"{currency}{amount:.2f}"


def format_transfer(transfer: Transfer, currency: str = CURRENCY_SYMBOL) -> str:
    """Render a transfer as a 'from → to: amount' line"""
    return f"{transfer.from_member} → {transfer.to_member}: {format_amount(transfer.amount, currency)}"


def build_share_text(
    group: Group,
    result: SettlementResult,
    recent: int = SHARE_RECENT_EXPENSES,
    currency: str = CURRENCY_SYMBOL,
) -> str:
    """Plain-text summary of a group for sharing with its members"""
    lines: List[str] = [
        f"SettleUp - {group.name}",
        "",
        f"Members: {', '.join(group.members)}",
        f"Total Expenses: {format_amount(group.total_expenses, currency)}",
        "",
    ]

    if group.expenses and recent > 0:
        lines.append("Recent Expenses:")
        for expense in group.expenses[-recent:]:
            lines.append(f"• {expense.name}: {format_amount(expense.amount, currency)} (paid by {expense.paid_by})")
        lines.append("")

    if result.transfers:
        lines.append("Settlements Needed:")
        for transfer in result.transfers:
            lines.append(f"• {format_transfer(transfer, currency)}")
    else:
        lines.append("All settled up! No payments needed.")

    return "\n".join(lines)
