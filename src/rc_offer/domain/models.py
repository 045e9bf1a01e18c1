"""Offer domain model — pure dataclass, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

from src.rc_common.enums import OfferState, RecordDiscriminator

OFFER_SCHEMA_VERSION = 1


@dataclass
class Offer:
    id: str
    address: str             # PDA of (buyer, metadata, reward_center)
    reward_center: str
    buyer: str
    metadata: str
    token_mint: str
    token_account: str       # NFT account the bid targets
    trade_state: str         # buyer escrow held by the auction house
    price: int
    token_size: int
    bump: int
    state: str = OfferState.ACTIVE.value
    discriminator: str = RecordDiscriminator.OFFER.value
    schema_version: int = OFFER_SCHEMA_VERSION
    created_at: datetime | None = None
    updated_at: datetime | None = None
    canceled_at: datetime | None = None
    accepted_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.state == OfferState.ACTIVE.value
