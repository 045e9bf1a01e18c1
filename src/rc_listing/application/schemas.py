"""Instruction accounts, params and read models for listings."""

from datetime import datetime

from pydantic import BaseModel

from src.rc_common.types import Address, U64Int
from src.rc_listing.domain.models import Listing


class CreateListingAccounts(BaseModel):
    reward_center: Address
    metadata: Address
    token_mint: Address
    token_account: Address
    listing: Address


class CreateListingParams(BaseModel):
    price: U64Int
    token_size: U64Int = 1


class UpdateListingAccounts(BaseModel):
    reward_center: Address
    listing: Address


class UpdateListingParams(BaseModel):
    new_price: U64Int


class CloseListingAccounts(BaseModel):
    reward_center: Address
    listing: Address


class ListingResponse(BaseModel):
    address: str
    discriminator: str
    schema_version: int
    reward_center: str
    seller: str
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
    purchased_at: datetime | None = None

    @classmethod
    def from_domain(cls, listing: Listing) -> "ListingResponse":
        return cls(
            address=listing.address,
            discriminator=listing.discriminator,
            schema_version=listing.schema_version,
            reward_center=listing.reward_center,
            seller=listing.seller,
            metadata=listing.metadata,
            token_mint=listing.token_mint,
            token_account=listing.token_account,
            trade_state=listing.trade_state,
            price=listing.price,
            token_size=listing.token_size,
            state=listing.state,
            created_at=listing.created_at,
            updated_at=listing.updated_at,
            canceled_at=listing.canceled_at,
            purchased_at=listing.purchased_at,
        )


class ListingListResponse(BaseModel):
    items: list[ListingResponse]
