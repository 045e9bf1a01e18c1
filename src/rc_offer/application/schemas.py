"""Instruction accounts, params and read models for offers."""

from datetime import datetime

from pydantic import BaseModel

from src.rc_common.types import Address, U64Int
from src.rc_offer.domain.models import Offer


class CreateOfferAccounts(BaseModel):
    reward_center: Address
    metadata: Address
    token_mint: Address
    token_account: Address
    offer: Address


class CreateOfferParams(BaseModel):
    price: U64Int
    token_size: U64Int = 1


class CloseOfferAccounts(BaseModel):
    reward_center: Address
    offer: Address


class OfferResponse(BaseModel):
    address: str
    discriminator: str
    schema_version: int
    reward_center: str
    buyer: str
    metadata: str
    token_mint: str
    token_account: str
    trade_state: str
    price: int
    token_size: int
    state: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    canceled_at: datetime | None = None
    accepted_at: datetime | None = None

    @classmethod
    def from_domain(cls, offer: Offer) -> "OfferResponse":
        return cls(
            address=offer.address,
            discriminator=offer.discriminator,
            schema_version=offer.schema_version,
            reward_center=offer.reward_center,
            buyer=offer.buyer,
            metadata=offer.metadata,
            token_mint=offer.token_mint,
            token_account=offer.token_account,
            trade_state=offer.trade_state,
            price=offer.price,
            token_size=offer.token_size,
            state=offer.state,
            created_at=offer.created_at,
            updated_at=offer.updated_at,
            canceled_at=offer.canceled_at,
            accepted_at=offer.accepted_at,
        )


class OfferListResponse(BaseModel):
    items: list[OfferResponse]
