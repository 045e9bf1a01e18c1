"""Reward disbursement planning when the treasury may be short.

Proportional degrade: if the disbursable balance cannot cover both rewards,
each side receives the same fraction (floored) of what it was owed. Planning
never fails, so a short treasury never aborts a sale.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Disbursement:
    buyer_amount: int
    seller_amount: int

    @property
    def total(self) -> int:
        return self.buyer_amount + self.seller_amount


def plan_disbursement(buyer_amount: int, seller_amount: int, available: int) -> Disbursement:
    available = max(available, 0)
    total = buyer_amount + seller_amount
    if total <= available:
        return Disbursement(buyer_amount, seller_amount)
    # total > available >= 0 here
    return Disbursement(
        buyer_amount=buyer_amount * available // total,
        seller_amount=seller_amount * available // total,
    )
