"""Fair allocation of an expense amount across participants in whole minor units."""

import logging
import random
from collections.abc import Sequence

from .exceptions import InvalidAmount, InvalidParticipantSet
from .models import Participant, ParticipantShare

logger = logging.getLogger(__name__)


def allocate(
    total_cents: int,
    payee: Participant,
    participants: Sequence[Participant],
    *,
    rng: random.Random | None = None,
    seed: int | None = None,
) -> list[ParticipantShare]:
    """
    Split total_cents across participants so the shares add up exactly.

    Steps:
    1. Give every participant total // n
    2. Shuffle the participants and give one extra unit to each of the
       first total % n of them

    The shares are returned in the order participants were given, payee
    included.

    Args:
        total_cents: Amount to split, in minor units
        payee: Participant who paid; must be one of participants
        participants: Everyone sharing the expense
        rng: Random source used to pick who receives the remainder
        seed: Seed for a fresh random source when rng is not given.
              With neither, the remainder goes to a different random
              subset on every call.

    Returns:
        One share per participant

    Raises:
        InvalidAmount: If total_cents is negative
        InvalidParticipantSet: If participants is empty, repeats someone or
                               does not include the payee
    """
    if total_cents < 0:
        raise InvalidAmount(f"Cannot split a negative amount: {total_cents}")
    if not participants:
        raise InvalidParticipantSet("At least one participant is required")
    if len(set(participants)) != len(participants):
        raise InvalidParticipantSet("Participants must not contain duplicates")
    if payee not in participants:
        raise InvalidParticipantSet(f"Payee {payee.name} must be one of the participants")

    if rng is None:
        rng = random.Random(seed)

    n = len(participants)
    base, remainder = divmod(total_cents, n)
    amounts = [base] * n

    order = list(range(n))
    rng.shuffle(order)
    for index in order[:remainder]:
        amounts[index] += 1

    if remainder:
        lucky = ", ".join(participants[i].name for i in sorted(order[:remainder]))
        logger.debug(f"Distributed {remainder} remainder unit(s) to: {lucky}")

    shares = [
        ParticipantShare(participant=participant, amount_cents=amount)
        for participant, amount in zip(participants, amounts)
    ]

    # Final verification
    assert sum(s.amount_cents for s in shares) == total_cents, "Allocation lost money"

    return shares
