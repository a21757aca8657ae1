"""Greedy debt simplification."""

import heapq
import logging
from collections.abc import Mapping

from .models import Debt, Participant

logger = logging.getLogger(__name__)

# (negated outstanding amount, participant id, participant)
_HeapEntry = tuple[int, int, Participant]


def _push(heap: list[_HeapEntry], participant: Participant, amount: int) -> None:
    heapq.heappush(heap, (-amount, participant.id, participant))


def settle(balances: Mapping[Participant, int]) -> list[Debt]:
    """
    Reduce balances to a list of payments that settles them.

    Steps:
    1. Split participants into creditors (balance > 0) and debtors (balance < 0)
    2. Repeatedly match the largest creditor with the largest debtor
    3. The smaller side is paid off in full, the other side goes back on
       its heap with the remainder
    4. Stop when either side runs out; whatever is left is rounding slack

    Equal amounts are taken in ascending participant id order, so the result
    is deterministic. This is a heuristic: it produces at most
    len(balances) - 1 payments but not necessarily the fewest possible.

    Args:
        balances: Balance per participant in minor units

    Returns:
        Payments in the order they were matched
    """
    creditors: list[_HeapEntry] = []
    debtors: list[_HeapEntry] = []
    for participant, balance in balances.items():
        if balance > 0:
            _push(creditors, participant, balance)
        elif balance < 0:
            _push(debtors, participant, -balance)

    debts: list[Debt] = []
    while creditors and debtors:
        credit, _, creditor = heapq.heappop(creditors)
        owing, _, debtor = heapq.heappop(debtors)
        credit, owing = -credit, -owing

        amount = min(credit, owing)
        if creditor != debtor:
            debts.append(Debt(debtor=debtor, creditor=creditor, amount_cents=amount))

        if credit - amount > 0:
            _push(creditors, creditor, credit - amount)
        if owing - amount > 0:
            _push(debtors, debtor, owing - amount)

    slack = sum(-entry[0] for entry in creditors + debtors)
    if slack:
        logger.debug(f"Discarded {slack} unit(s) of rounding slack")

    logger.debug(f"Settled {len(balances)} balances with {len(debts)} payments")

    return debts
