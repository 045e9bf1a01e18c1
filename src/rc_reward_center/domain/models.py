"""RewardCenter domain model — pure dataclass, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

from src.rc_common.enums import RecordDiscriminator
from src.rc_common.pda import ProgramAuthority, reward_center_authority
from src.rc_rewards.domain.rules import RewardRules

REWARD_CENTER_SCHEMA_VERSION = 1


@dataclass
class RewardCenter:
    address: str
    auction_house: str
    token_mint: str          # reward mint
    treasury: str            # reward-token account owned by this record's PDA
    reward_rules: RewardRules
    bump: int
    discriminator: str = RecordDiscriminator.REWARD_CENTER.value
    schema_version: int = REWARD_CENTER_SCHEMA_VERSION
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def authority(self) -> ProgramAuthority:
        """Seeds-based signing authority of this reward center's PDA."""
        return reward_center_authority(self.auction_house, self.bump)
