"""Listing domain model — pure dataclass, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

from src.rc_common.enums import ListingState, RecordDiscriminator

LISTING_SCHEMA_VERSION = 1


@dataclass
class Listing:
    id: str
    address: str             # PDA of (seller, metadata, reward_center)
    reward_center: str
    seller: str
    metadata: str
    token_mint: str
    token_account: str       # seller's NFT account
    trade_state: str         # seller escrow held by the auction house
    price: int
    token_size: int
    bump: int
    state: str = ListingState.ACTIVE.value
    discriminator: str = RecordDiscriminator.LISTING.value
    schema_version: int = LISTING_SCHEMA_VERSION
    created_at: datetime | None = None
    updated_at: datetime | None = None
    canceled_at: datetime | None = None
    purchased_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.state == ListingState.ACTIVE.value
