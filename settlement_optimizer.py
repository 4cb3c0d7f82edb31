from typing import Dict, List, Tuple
import logging
import math

from models import Group, SettlementResult, Transfer

logger = logging.getLogger(__name__)

# One minor currency unit; balances within it count as settled
SETTLEMENT_TOLERANCE = 0.01


class SettlementOptimizer:
    @staticmethod
    def calculate_balances(group: Group) -> Dict[str, float]:
        """Calculate net balance for each member"""
        if not group.expenses:
            return {}

        balances = {member: 0.0 for member in group.members}

        for expense in group.expenses:
            # An empty split means everyone shares the cost
            split_between = expense.split_between or group.members
            share = expense.amount / len(split_between)

            # Payer fronted the full cost
            balances[expense.paid_by] += expense.amount

            for member in split_between:
                balances[member] -= share

        return balances

    @staticmethod
    def classify(balances: Dict[str, float]) -> Tuple[List[list], List[list]]:
        """Split balances into creditors and debtors, largest amount first"""
        creditors = []
        debtors = []

        for member, balance in balances.items():
            if balance > SETTLEMENT_TOLERANCE:
                creditors.append([member, balance])
            elif balance < -SETTLEMENT_TOLERANCE:
                debtors.append([member, abs(balance)])

        # Stable sort: ties keep member order
        creditors.sort(key=lambda x: x[1], reverse=True)
        debtors.sort(key=lambda x: x[1], reverse=True)

        return creditors, debtors

    @staticmethod
    def minimize_transactions(balances: Dict[str, float]) -> List[Transfer]:
        """Match debtors to creditors greedily, largest first"""
        creditors, debtors = SettlementOptimizer.classify(balances)
        transfers = []

        i = j = 0
        while i < len(creditors) and j < len(debtors):
            creditor = creditors[i]
            debtor = debtors[j]

            settle_amount = min(creditor[1], debtor[1])
            if not math.isfinite(settle_amount):
                logger.warning(f"Non-finite amount between {debtor[0]} and {creditor[0]}, stopping settlement")
                break

            if settle_amount > SETTLEMENT_TOLERANCE:
                transfers.append(Transfer(from_member=debtor[0], to_member=creditor[0], amount=settle_amount))

            creditor[1] -= settle_amount
            debtor[1] -= settle_amount

            if creditor[1] <= SETTLEMENT_TOLERANCE:
                i += 1
            if debtor[1] <= SETTLEMENT_TOLERANCE:
                j += 1

        return transfers

    @staticmethod
    def optimize_settlements(group: Group) -> SettlementResult:
        """Main method to calculate optimal settlements"""
        balances = SettlementOptimizer.calculate_balances(group)
        transfers = SettlementOptimizer.minimize_transactions(balances)

        logger.info(f"Group {group.id}: {len(group.expenses)} expenses settled with {len(transfers)} transfers")

        return SettlementResult(
            group_id=group.id,
            balances=balances,
            transfers=transfers,
            settled=not transfers,
        )


def compute_settlements(group: Group) -> SettlementResult:
    return SettlementOptimizer.optimize_settlements(group)
