# tests/integration/test_admin_cli.py
"""Admin CLI commands against the SQLite record store."""

import json

import pytest
from solders.keypair import Keypair
from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_auction_house.infrastructure.simulated import SimulatedAuctionHouse
from src.rc_cli.main import AdminCommands, main
from src.rc_common.enums import PayoutOperation
from src.rc_common.errors import AdapterError, RewardCenterExistsError
from src.rc_common.pda import (
    NATIVE_MINT,
    find_associated_token_address,
    find_auction_house_address,
    find_auction_house_treasury_address,
    find_reward_center_address,
)
from src.rc_reward_center.application.service import RewardCenterService
from src.rc_runtime.executor import TransactionExecutor
from src.rc_token.infrastructure.ledger import TokenLedger


@pytest.fixture
def keypair() -> Keypair:
    return Keypair()


@pytest.fixture
def executor(session_factory) -> TransactionExecutor:
    return TransactionExecutor(session_factory)


async def _native_mint_owned_by(executor: TransactionExecutor, wallet: str) -> None:
    """Whole-unit native mint so amounts need no scaling in assertions."""
    await executor.run(
        "native_mint",
        [wallet],
        lambda db: TokenLedger().create_mint(db, NATIVE_MINT, wallet, 0),
    )


class TestCreateRewardCenter:
    async def test_bootstraps_house_mint_and_center(
        self, executor: TransactionExecutor, keypair: Keypair, tmp_path
    ) -> None:
        config = tmp_path / "reward_center.json"
        config.write_text(
            json.dumps(
                {
                    "mathematical_operand": "Multiple",
                    "payout_numeral": 3,
                    "seller_reward_payout_basis_points": 2000,
                }
            )
        )
        commands = AdminCommands(executor, keypair)
        address, rewards_mint = await commands.create_reward_center(None, None, str(config))

        wallet = str(keypair.pubkey())
        house, _ = find_auction_house_address(wallet, NATIVE_MINT)
        assert address == find_reward_center_address(house)[0]

        rc = await executor.read(lambda db: RewardCenterService().load(db, address))
        assert rc.token_mint == rewards_mint
        assert rc.reward_rules.mathematical_operand == PayoutOperation.MULTIPLY
        assert rc.reward_rules.payout_numeral == 3

        ledger = TokenLedger()
        authority_ata = find_associated_token_address(wallet, rewards_mint)
        assert await executor.read(lambda db: ledger.get_account(db, authority_ata)) is not None
        adapter = SimulatedAuctionHouse(ledger)
        ah = await executor.read(lambda db: adapter.get_auction_house(db, house))
        assert ah.auctioneer == address
        assert ah.seller_fee_basis_points == 100

    async def test_missing_config_uses_defaults(
        self, executor: TransactionExecutor, keypair: Keypair, tmp_path
    ) -> None:
        commands = AdminCommands(executor, keypair)
        address, _ = await commands.create_reward_center(
            None, None, str(tmp_path / "absent.json")
        )
        rc = await executor.read(lambda db: RewardCenterService().load(db, address))
        assert rc.reward_rules.mathematical_operand == PayoutOperation.DIVIDE
        assert rc.reward_rules.payout_numeral == 5
        assert rc.reward_rules.seller_reward_payout_basis_points == 1000

    async def test_second_center_for_same_house_rejected(
        self, executor: TransactionExecutor, keypair: Keypair
    ) -> None:
        commands = AdminCommands(executor, keypair)
        await commands.create_reward_center(None, None, None)
        with pytest.raises(RewardCenterExistsError):
            await commands.create_reward_center(None, None, None)


class TestWithdrawAuctionHouseTreasury:
    async def test_withdraws_scaled_amount(
        self, executor: TransactionExecutor, keypair: Keypair
    ) -> None:
        wallet = str(keypair.pubkey())
        await _native_mint_owned_by(executor, wallet)
        commands = AdminCommands(executor, keypair)
        await commands.create_reward_center(None, None, None)

        house, _ = find_auction_house_address(wallet, NATIVE_MINT)
        ledger = TokenLedger()

        async def fund(db: AsyncSession) -> None:
            await ledger.mint_to(
                db, NATIVE_MINT, find_auction_house_treasury_address(house), 5, wallet
            )

        await executor.run("fund_house_treasury", [wallet], fund)

        withdrawn = await commands.withdraw_auction_house_treasury(house, 3)
        assert withdrawn == 3
        destination = find_associated_token_address(wallet, NATIVE_MINT)
        assert await executor.read(lambda db: ledger.balance(db, destination)) == 3

    async def test_overdraw_rejected(self, executor: TransactionExecutor, keypair: Keypair) -> None:
        wallet = str(keypair.pubkey())
        await _native_mint_owned_by(executor, wallet)
        commands = AdminCommands(executor, keypair)
        await commands.create_reward_center(None, None, None)
        house, _ = find_auction_house_address(wallet, NATIVE_MINT)
        with pytest.raises(AdapterError):
            await commands.withdraw_auction_house_treasury(house, 1)

    async def test_non_authority_rejected(
        self, executor: TransactionExecutor, keypair: Keypair
    ) -> None:
        await AdminCommands(executor, keypair).create_reward_center(None, None, None)
        house, _ = find_auction_house_address(str(keypair.pubkey()), NATIVE_MINT)
        with pytest.raises(AdapterError):
            await AdminCommands(executor, Keypair()).withdraw_auction_house_treasury(house, 0)


class TestMain:
    def test_missing_keypair_exits_nonzero(self, tmp_path, capsys) -> None:
        code = main(
            [
                "--keypair",
                str(tmp_path / "missing.json"),
                "--database-url",
                "sqlite+aiosqlite://",
                "withdraw-auction-house-treasury",
                "--auction-house",
                str(Keypair().pubkey()),
                "--amount",
                "1",
            ]
        )
        assert code == 1
        assert "error" in capsys.readouterr().err
