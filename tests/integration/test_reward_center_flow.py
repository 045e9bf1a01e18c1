# tests/integration/test_reward_center_flow.py
"""Reward center lifecycle against a real (SQLite) record store:
create → edit → withdraw, plus the rejection paths."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_common.enums import PayoutOperation
from src.rc_common.errors import (
    AddressMismatchError,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidBasisPointsError,
    RewardCenterExistsError,
    SignerMismatchError,
    ZeroPayoutNumeralError,
)
from src.rc_common.pda import (
    NATIVE_MINT,
    find_associated_token_address,
    find_reward_center_address,
)
from src.rc_reward_center.application.schemas import (
    CreateRewardCenterAccounts,
    CreateRewardCenterParams,
    EditRewardCenterAccounts,
    EditRewardCenterParams,
    RewardRulesSchema,
    WithdrawRewardCenterFundsAccounts,
    WithdrawRewardCenterFundsParams,
)
from tests.integration.marketplace import TREASURY_FUNDING, Marketplace, new_address


def _rules(operand=PayoutOperation.DIVIDE, numeral=5, bps=1000) -> RewardRulesSchema:
    return RewardRulesSchema(
        mathematical_operand=operand,
        payout_numeral=numeral,
        seller_reward_payout_basis_points=bps,
    )


async def _new_auction_house(market: Marketplace) -> tuple[str, str]:
    """A second auction house (own authority) without a reward center yet."""
    authority = new_address()

    async def body(db: AsyncSession) -> str:
        house = await market.adapter.create_auction_house(db, authority, NATIVE_MINT, 100)
        return house.address

    address = await market.program.executor.run("new_auction_house", [authority], body)
    return authority, address


def _create_accounts(auction_house: str, mint: str) -> CreateRewardCenterAccounts:
    reward_center, _ = find_reward_center_address(auction_house)
    return CreateRewardCenterAccounts(
        auction_house=auction_house,
        token_mint=mint,
        reward_center=reward_center,
        treasury=find_associated_token_address(reward_center, mint),
    )


def _withdraw_accounts(market: Marketplace, destination: str) -> WithdrawRewardCenterFundsAccounts:
    return WithdrawRewardCenterFundsAccounts(
        auction_house=market.auction_house,
        reward_center=market.reward_center,
        treasury=market.treasury,
        destination=destination,
    )


async def _authority_reward_account(market: Marketplace) -> str:
    async def body(db: AsyncSession) -> str:
        account = await market.ledger.get_or_create_associated_account(
            db, market.authority, market.reward_mint
        )
        return account.address

    return await market.program.executor.run("ata", [market.authority], body)


class TestCreateRewardCenter:
    async def test_created_record_and_treasury(self, market: Marketplace) -> None:
        rc = await market.read(
            lambda db: market.program.reward_centers.load(db, market.reward_center)
        )
        assert rc.auction_house == market.auction_house
        assert rc.token_mint == market.reward_mint
        assert rc.treasury == market.treasury
        assert rc.discriminator == "RewardCenter"
        assert rc.schema_version == 1
        assert rc.reward_rules.payout_numeral == 5
        assert await market.treasury_balance() == TREASURY_FUNDING

    async def test_auction_house_auctioneer_is_reward_center(self, market: Marketplace) -> None:
        house = await market.read(
            lambda db: market.adapter.get_auction_house(db, market.auction_house)
        )
        assert house.auctioneer == market.reward_center

    async def test_duplicate_rejected(self, market: Marketplace) -> None:
        with pytest.raises(RewardCenterExistsError):
            await market.program.create_reward_center(
                market.authority,
                _create_accounts(market.auction_house, market.reward_mint),
                CreateRewardCenterParams(reward_rules=_rules()),
            )

    async def test_non_authority_rejected(self, market: Marketplace) -> None:
        authority, house = await _new_auction_house(market)
        with pytest.raises(SignerMismatchError):
            await market.program.create_reward_center(
                market.seller,
                _create_accounts(house, market.reward_mint),
                CreateRewardCenterParams(reward_rules=_rules()),
            )

    async def test_wrong_reward_center_address_rejected(self, market: Marketplace) -> None:
        authority, house = await _new_auction_house(market)
        accounts = _create_accounts(house, market.reward_mint)
        accounts.reward_center = market.reward_center
        with pytest.raises(AddressMismatchError):
            await market.program.create_reward_center(
                authority, accounts, CreateRewardCenterParams(reward_rules=_rules())
            )

    async def test_bps_boundary(self, market: Marketplace) -> None:
        authority, house = await _new_auction_house(market)
        with pytest.raises(InvalidBasisPointsError):
            await market.program.create_reward_center(
                authority,
                _create_accounts(house, market.reward_mint),
                CreateRewardCenterParams(reward_rules=_rules(bps=10_001)),
            )
        rc = await market.program.create_reward_center(
            authority,
            _create_accounts(house, market.reward_mint),
            CreateRewardCenterParams(reward_rules=_rules(bps=10_000)),
        )
        assert rc.reward_rules.seller_reward_payout_basis_points == 10_000

    async def test_failed_create_leaves_no_state(self, market: Marketplace) -> None:
        authority, house = await _new_auction_house(market)
        accounts = _create_accounts(house, market.reward_mint)
        with pytest.raises(ZeroPayoutNumeralError):
            await market.program.create_reward_center(
                authority, accounts, CreateRewardCenterParams(reward_rules=_rules(numeral=0))
            )
        assert await market.read(
            lambda db: market.ledger.get_account(db, accounts.treasury)
        ) is None
        house_after = await market.read(lambda db: market.adapter.get_auction_house(db, house))
        assert house_after.auctioneer is None


class TestEditRewardCenter:
    async def test_replaces_rules(self, market: Marketplace) -> None:
        rc = await market.program.edit_reward_center(
            market.authority,
            EditRewardCenterAccounts(
                auction_house=market.auction_house, reward_center=market.reward_center
            ),
            EditRewardCenterParams(reward_rules=_rules(PayoutOperation.MULTIPLY, 2, 2500)),
        )
        assert rc.reward_rules.mathematical_operand == PayoutOperation.MULTIPLY
        assert rc.reward_rules.payout_numeral == 2
        assert rc.reward_rules.seller_reward_payout_basis_points == 2500

    async def test_non_authority_rejected(self, market: Marketplace) -> None:
        with pytest.raises(SignerMismatchError):
            await market.program.edit_reward_center(
                market.seller,
                EditRewardCenterAccounts(
                    auction_house=market.auction_house, reward_center=market.reward_center
                ),
                EditRewardCenterParams(reward_rules=_rules()),
            )

    async def test_invalid_rules_keep_old_ones(self, market: Marketplace) -> None:
        with pytest.raises(InvalidBasisPointsError):
            await market.program.edit_reward_center(
                market.authority,
                EditRewardCenterAccounts(
                    auction_house=market.auction_house, reward_center=market.reward_center
                ),
                EditRewardCenterParams(reward_rules=_rules(bps=10_001)),
            )
        rc = await market.read(
            lambda db: market.program.reward_centers.load(db, market.reward_center)
        )
        assert rc.reward_rules.seller_reward_payout_basis_points == 1000


class TestWithdrawRewardCenterFunds:
    async def test_withdraw_moves_tokens(self, market: Marketplace) -> None:
        destination = await _authority_reward_account(market)
        remaining = await market.program.withdraw_reward_center_funds(
            market.authority,
            _withdraw_accounts(market, destination),
            WithdrawRewardCenterFundsParams(amount=400),
        )
        assert remaining == TREASURY_FUNDING - 400
        assert await market.balance(destination) == 400
        assert await market.treasury_balance() == TREASURY_FUNDING - 400

    async def test_over_withdraw_fails_and_keeps_balance(self, market: Marketplace) -> None:
        destination = await _authority_reward_account(market)
        with pytest.raises(InsufficientFundsError):
            await market.program.withdraw_reward_center_funds(
                market.authority,
                _withdraw_accounts(market, destination),
                WithdrawRewardCenterFundsParams(amount=TREASURY_FUNDING + 1),
            )
        assert await market.treasury_balance() == TREASURY_FUNDING
        assert await market.balance(destination) == 0

    async def test_zero_amount_rejected(self, market: Marketplace) -> None:
        destination = await _authority_reward_account(market)
        with pytest.raises(InvalidAmountError):
            await market.program.withdraw_reward_center_funds(
                market.authority,
                _withdraw_accounts(market, destination),
                WithdrawRewardCenterFundsParams(amount=0),
            )

    async def test_non_authority_rejected(self, market: Marketplace) -> None:
        destination = await _authority_reward_account(market)
        with pytest.raises(SignerMismatchError):
            await market.program.withdraw_reward_center_funds(
                market.seller,
                _withdraw_accounts(market, destination),
                WithdrawRewardCenterFundsParams(amount=1),
            )

    async def test_wrong_treasury_rejected(self, market: Marketplace) -> None:
        destination = await _authority_reward_account(market)
        accounts = _withdraw_accounts(market, destination)
        accounts.treasury = destination
        with pytest.raises(AddressMismatchError):
            await market.program.withdraw_reward_center_funds(
                market.authority, accounts, WithdrawRewardCenterFundsParams(amount=1)
            )

