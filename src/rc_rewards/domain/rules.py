"""Reward rules engine — pure integer arithmetic, no I/O.

A sale price is turned into a reward pool by the payout operation:

  DIVIDE:   pool = price // payout_numeral
  MULTIPLY: pool = price * payout_numeral            (saturating)

The pool is then split between seller and buyer:

  seller = pool * seller_bps // 10000                (saturating multiply)
  buyer  = pool - seller

Reward amounts are bonuses, not settlement amounts, so overflow saturates at
U64_MAX instead of failing the sale.
"""

from dataclasses import dataclass

from src.rc_common.enums import PayoutOperation
from src.rc_common.errors import InvalidBasisPointsError, ZeroPayoutNumeralError
from src.rc_common.u64 import (
    BASIS_POINTS_DENOMINATOR,
    apply_basis_points,
    saturating_mul,
    saturating_sub,
)


@dataclass(frozen=True)
class RewardRules:
    mathematical_operand: PayoutOperation
    payout_numeral: int
    seller_reward_payout_basis_points: int


def validate_reward_rules(rules: RewardRules) -> None:
    """Raise ConfigurationError for rules that can never be settled against."""
    if not (0 <= rules.seller_reward_payout_basis_points <= BASIS_POINTS_DENOMINATOR):
        raise InvalidBasisPointsError(rules.seller_reward_payout_basis_points)
    if rules.payout_numeral == 0:
        raise ZeroPayoutNumeralError()


def reward_pool(price: int, rules: RewardRules) -> int:
    if rules.mathematical_operand == PayoutOperation.DIVIDE:
        return price // rules.payout_numeral
    return saturating_mul(price, rules.payout_numeral)


def compute_reward(price: int, rules: RewardRules) -> tuple[int, int]:
    """Return (buyer_amount, seller_amount) for a sale at `price`.

    Divide-by-zero is impossible here: rules are validated when a reward
    center is created or edited.
    """
    pool = reward_pool(price, rules)
    seller_amount = apply_basis_points(pool, rules.seller_reward_payout_basis_points)
    buyer_amount = saturating_sub(pool, seller_amount)
    return buyer_amount, seller_amount
