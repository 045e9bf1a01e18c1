"""Instruction accounts, params and read models for the reward center."""

from datetime import datetime

from pydantic import BaseModel

from src.rc_common.enums import PayoutOperation
from src.rc_common.types import Address, U16Int, U64Int
from src.rc_reward_center.domain.models import RewardCenter
from src.rc_rewards.domain.rules import RewardRules


class RewardRulesSchema(BaseModel):
    mathematical_operand: PayoutOperation
    payout_numeral: U64Int
    seller_reward_payout_basis_points: U16Int

    def to_domain(self) -> RewardRules:
        return RewardRules(
            mathematical_operand=self.mathematical_operand,
            payout_numeral=self.payout_numeral,
            seller_reward_payout_basis_points=self.seller_reward_payout_basis_points,
        )


class CreateRewardCenterAccounts(BaseModel):
    auction_house: Address
    token_mint: Address
    reward_center: Address
    treasury: Address


class CreateRewardCenterParams(BaseModel):
    reward_rules: RewardRulesSchema


class EditRewardCenterAccounts(BaseModel):
    auction_house: Address
    reward_center: Address


class EditRewardCenterParams(BaseModel):
    reward_rules: RewardRulesSchema


class WithdrawRewardCenterFundsAccounts(BaseModel):
    auction_house: Address
    reward_center: Address
    treasury: Address
    destination: Address


class WithdrawRewardCenterFundsParams(BaseModel):
    amount: U64Int


class RewardCenterResponse(BaseModel):
    address: str
    discriminator: str
    schema_version: int
    auction_house: str
    token_mint: str
    treasury: str
    treasury_balance: int | None = None
    reward_rules: RewardRulesSchema
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(
        cls, reward_center: RewardCenter, treasury_balance: int | None = None
    ) -> "RewardCenterResponse":
        rules = reward_center.reward_rules
        return cls(
            address=reward_center.address,
            discriminator=reward_center.discriminator,
            schema_version=reward_center.schema_version,
            auction_house=reward_center.auction_house,
            token_mint=reward_center.token_mint,
            treasury=reward_center.treasury,
            treasury_balance=treasury_balance,
            reward_rules=RewardRulesSchema(
                mathematical_operand=rules.mathematical_operand,
                payout_numeral=rules.payout_numeral,
                seller_reward_payout_basis_points=rules.seller_reward_payout_basis_points,
            ),
            created_at=reward_center.created_at,
            updated_at=reward_center.updated_at,
        )
