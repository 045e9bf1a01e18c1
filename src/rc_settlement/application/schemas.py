"""Instruction accounts and results for settlement."""

from pydantic import BaseModel

from src.rc_common.types import Address
from src.rc_listing.application.schemas import ListingResponse
from src.rc_offer.application.schemas import OfferResponse


class BuyListingAccounts(BaseModel):
    reward_center: Address
    listing: Address
    treasury: Address
    buyer_reward_token_account: Address
    seller_reward_token_account: Address


class AcceptOfferAccounts(BaseModel):
    reward_center: Address
    listing: Address
    offer: Address
    treasury: Address
    buyer_reward_token_account: Address
    seller_reward_token_account: Address


class SettlementResult(BaseModel):
    listing: ListingResponse
    offer: OfferResponse | None = None
    price_paid: int
    fee_paid: int
    seller_proceeds: int
    buyer_token_account: str
    buyer_reward_computed: int
    seller_reward_computed: int
    buyer_reward_paid: int
    seller_reward_paid: int
