"""RewardCenterService — create, edit and withdraw from reward centers.

Every method runs inside the caller's transaction (see TransactionExecutor);
validation happens before the first write, and any exception rolls back
everything the instruction did.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.rc_auction_house.domain.adapter import AuctionHouseAdapterProtocol
from src.rc_auction_house.infrastructure.simulated import SimulatedAuctionHouse
from src.rc_common.errors import (
    InsufficientFundsError,
    InvalidAmountError,
    RecordNotFoundError,
    RewardCenterExistsError,
)
from src.rc_common.pda import (
    assert_address,
    find_associated_token_address,
    find_reward_center_address,
)
from src.rc_common.signers import require_signer
from src.rc_common.u64 import saturating_sub
from src.rc_reward_center.application.schemas import (
    CreateRewardCenterAccounts,
    CreateRewardCenterParams,
    EditRewardCenterAccounts,
    EditRewardCenterParams,
    RewardCenterResponse,
    WithdrawRewardCenterFundsAccounts,
    WithdrawRewardCenterFundsParams,
)
from src.rc_reward_center.domain.models import RewardCenter
from src.rc_reward_center.domain.repository import RewardCenterRepositoryProtocol
from src.rc_reward_center.infrastructure.persistence import RewardCenterRepository
from src.rc_rewards.domain.rules import validate_reward_rules
from src.rc_token.domain.repository import TokenLedgerProtocol
from src.rc_token.infrastructure.ledger import TokenLedger

logger = logging.getLogger(__name__)


class RewardCenterService:
    def __init__(
        self,
        repo: RewardCenterRepositoryProtocol | None = None,
        ledger: TokenLedgerProtocol | None = None,
        adapter: AuctionHouseAdapterProtocol | None = None,
        reserve_floor: int | None = None,
    ) -> None:
        self._repo: RewardCenterRepositoryProtocol = repo or RewardCenterRepository()
        self._ledger: TokenLedgerProtocol = ledger or TokenLedger()
        self._adapter: AuctionHouseAdapterProtocol = adapter or SimulatedAuctionHouse(
            self._ledger
        )
        self._reserve_floor = (
            settings.TREASURY_RESERVE_FLOOR if reserve_floor is None else reserve_floor
        )

    async def load(self, db: AsyncSession, address: str) -> RewardCenter:
        """Fetch a reward center and check it sits at its derived address."""
        reward_center = await self._repo.get_by_address(db, address)
        if reward_center is None:
            raise RecordNotFoundError("RewardCenter", address)
        expected, _ = find_reward_center_address(reward_center.auction_house)
        assert_address("reward_center", expected, address)
        return reward_center

    async def disbursable_balance(self, db: AsyncSession, reward_center: RewardCenter) -> int:
        """Treasury balance above the reserve floor."""
        balance = await self._ledger.balance(db, reward_center.treasury)
        return saturating_sub(balance, self._reserve_floor)

    async def create_reward_center(
        self,
        db: AsyncSession,
        wallet: str,
        accounts: CreateRewardCenterAccounts,
        params: CreateRewardCenterParams,
    ) -> RewardCenter:
        auction_house = await self._adapter.get_auction_house(db, accounts.auction_house)
        require_signer("auction house authority", auction_house.authority, wallet)

        address, bump = find_reward_center_address(auction_house.address)
        assert_address("reward_center", address, accounts.reward_center)
        treasury = find_associated_token_address(address, accounts.token_mint)
        assert_address("treasury", treasury, accounts.treasury)

        rules = params.reward_rules.to_domain()
        validate_reward_rules(rules)

        if await self._repo.get_by_address(db, address) is not None:
            raise RewardCenterExistsError(address)
        await self._ledger.get_mint(db, accounts.token_mint)

        await self._ledger.get_or_create_associated_account(db, address, accounts.token_mint)
        await self._adapter.delegate_auctioneer(db, auction_house.address, wallet, address)
        reward_center = await self._repo.save(
            db,
            RewardCenter(
                address=address,
                auction_house=auction_house.address,
                token_mint=accounts.token_mint,
                treasury=treasury,
                reward_rules=rules,
                bump=bump,
            ),
        )
        logger.info(
            "Created reward center %s for auction house %s (mint=%s)",
            address,
            auction_house.address,
            accounts.token_mint,
        )
        return reward_center

    async def edit_reward_center(
        self,
        db: AsyncSession,
        wallet: str,
        accounts: EditRewardCenterAccounts,
        params: EditRewardCenterParams,
    ) -> RewardCenter:
        reward_center = await self.load(db, accounts.reward_center)
        assert_address("auction_house", reward_center.auction_house, accounts.auction_house)
        auction_house = await self._adapter.get_auction_house(db, reward_center.auction_house)
        require_signer("auction house authority", auction_house.authority, wallet)

        rules = params.reward_rules.to_domain()
        validate_reward_rules(rules)

        updated = await self._repo.update_rules(db, reward_center.address, rules)
        logger.info("Edited reward rules of %s: %s", reward_center.address, rules)
        return updated

    async def withdraw_reward_center_funds(
        self,
        db: AsyncSession,
        wallet: str,
        accounts: WithdrawRewardCenterFundsAccounts,
        params: WithdrawRewardCenterFundsParams,
    ) -> int:
        """Move reward tokens out of the treasury; returns the remaining balance."""
        reward_center = await self.load(db, accounts.reward_center)
        assert_address("auction_house", reward_center.auction_house, accounts.auction_house)
        assert_address("treasury", reward_center.treasury, accounts.treasury)
        auction_house = await self._adapter.get_auction_house(db, reward_center.auction_house)
        require_signer("auction house authority", auction_house.authority, wallet)

        if params.amount == 0:
            raise InvalidAmountError(params.amount)
        available = await self.disbursable_balance(db, reward_center)
        if params.amount > available:
            raise InsufficientFundsError(params.amount, available)

        treasury, _ = await self._ledger.transfer(
            db,
            reward_center.treasury,
            accounts.destination,
            params.amount,
            reward_center.authority.address,
        )
        logger.info(
            "Withdrew %d reward tokens from %s to %s",
            params.amount,
            reward_center.address,
            accounts.destination,
        )
        return treasury.amount

    # --- queries ---

    async def get_reward_center(self, db: AsyncSession, address: str) -> RewardCenterResponse:
        reward_center = await self.load(db, address)
        balance = await self._ledger.balance(db, reward_center.treasury)
        return RewardCenterResponse.from_domain(reward_center, treasury_balance=balance)
