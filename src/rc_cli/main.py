"""Admin CLI: create a reward center, withdraw from an auction house treasury.

    reward-center create-reward-center [--auction-house A] [--mint-rewards M] [--config F]
    reward-center withdraw-auction-house-treasury --auction-house A --amount N

Each command is submitted as one instruction. Transient database failures are
retried with exponential backoff; program errors are reported immediately.
Exit status is 0 on success and 1 on any failure.
"""

import argparse
import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable
from typing import TypeVar

from solders.keypair import Keypair
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.rc_auction_house.infrastructure.simulated import SimulatedAuctionHouse
from src.rc_cli.config import load_keypair, load_reward_rules
from src.rc_common.database import build_engine, build_session_factory
from src.rc_common.errors import AppError, RecordNotFoundError
from src.rc_common.pda import (
    NATIVE_MINT,
    find_associated_token_address,
    find_auction_house_address,
    find_reward_center_address,
)
from src.rc_common.u64 import saturating_mul, saturating_pow
from src.rc_reward_center.application.schemas import (
    CreateRewardCenterAccounts,
    CreateRewardCenterParams,
)
from src.rc_reward_center.application.service import RewardCenterService
from src.rc_runtime.executor import TransactionExecutor
from src.rc_token.infrastructure.ledger import TokenLedger

logger = logging.getLogger("rc.cli")

T = TypeVar("T")

DEFAULT_SELLER_FEE_BASIS_POINTS = 100
REWARDS_MINT_DECIMALS = 9
NATIVE_MINT_DECIMALS = 9

_TRANSIENT_ERRORS = (OperationalError, InterfaceError, ConnectionError, TimeoutError)


async def submit_with_retry(
    name: str,
    submit: Callable[[], Awaitable[T]],
    attempts: int | None = None,
    backoff_ms: int | None = None,
    factor: float | None = None,
) -> T:
    attempts = attempts or settings.SUBMIT_MAX_ATTEMPTS
    delay = (backoff_ms if backoff_ms is not None else settings.SUBMIT_BACKOFF_MS) / 1000
    factor = factor or settings.SUBMIT_BACKOFF_FACTOR
    for attempt in range(1, attempts + 1):
        try:
            return await submit()
        except _TRANSIENT_ERRORS as exc:
            if attempt == attempts:
                raise
            logger.warning(
                "%s attempt %d/%d failed (%s), retrying in %.0fms",
                name,
                attempt,
                attempts,
                exc,
                delay * 1000,
            )
            await asyncio.sleep(delay)
            delay *= factor
    raise AssertionError("unreachable")


class AdminCommands:
    def __init__(self, executor: TransactionExecutor, keypair: Keypair) -> None:
        self._executor = executor
        self._wallet = str(keypair.pubkey())
        self._ledger = TokenLedger()
        self._adapter = SimulatedAuctionHouse(self._ledger)
        self._reward_centers = RewardCenterService(ledger=self._ledger, adapter=self._adapter)

    async def create_reward_center(
        self, auction_house: str | None, mint_rewards: str | None, config_path: str | None
    ) -> tuple[str, str]:
        """Returns (reward_center, rewards_mint)."""
        rules = load_reward_rules(config_path)
        wallet = self._wallet
        create_house = auction_house is None
        auction_house = auction_house or find_auction_house_address(wallet, NATIVE_MINT)[0]
        rewards_mint = mint_rewards or str(Keypair().pubkey())
        reward_center, _ = find_reward_center_address(auction_house)
        treasury = find_associated_token_address(reward_center, rewards_mint)

        async def body(db: AsyncSession) -> str:
            if mint_rewards is None:
                logger.info("Rewards mint not passed, creating %s", rewards_mint)
                await self._ledger.create_mint(db, rewards_mint, wallet, REWARDS_MINT_DECIMALS)
                await self._ledger.get_or_create_associated_account(db, wallet, rewards_mint)
            if create_house and await self._adapter.find_auction_house(db, auction_house) is None:
                logger.info("Auction house %s not found, creating it with defaults", auction_house)
                await self._ensure_native_mint(db)
                await self._adapter.create_auction_house(
                    db, wallet, NATIVE_MINT, DEFAULT_SELLER_FEE_BASIS_POINTS
                )
            created = await self._reward_centers.create_reward_center(
                db,
                wallet,
                CreateRewardCenterAccounts(
                    auction_house=auction_house,
                    token_mint=rewards_mint,
                    reward_center=reward_center,
                    treasury=treasury,
                ),
                CreateRewardCenterParams(reward_rules=rules),
            )
            return created.address

        address = await submit_with_retry(
            "create-reward-center",
            lambda: self._executor.run(
                "create_reward_center", [wallet, auction_house, reward_center, treasury], body
            ),
        )
        logger.info("Reward center address: %s", address)
        if mint_rewards is None:
            logger.info("Rewards mint address: %s", rewards_mint)
        return address, rewards_mint

    async def withdraw_auction_house_treasury(self, auction_house: str, amount: int) -> int:
        """Withdraw `amount` whole tokens; returns the base-unit amount withdrawn."""

        async def body(db: AsyncSession) -> int:
            house = await self._adapter.get_auction_house(db, auction_house)
            mint = await self._ledger.get_mint(db, house.treasury_mint)
            scaled = saturating_mul(amount, saturating_pow(10, mint.decimals))
            logger.info(
                "Withdrawing %d tokens (%d base units) from %s", amount, scaled, auction_house
            )
            return await self._adapter.withdraw_from_treasury(
                db, auction_house, self._wallet, scaled
            )

        withdrawn = await submit_with_retry(
            "withdraw-auction-house-treasury",
            lambda: self._executor.run(
                "withdraw_from_treasury", [self._wallet, auction_house], body
            ),
        )
        logger.info("Withdrawal complete: %d base units", withdrawn)
        return withdrawn

    async def _ensure_native_mint(self, db: AsyncSession) -> None:
        try:
            await self._ledger.get_mint(db, NATIVE_MINT)
        except RecordNotFoundError:
            await self._ledger.create_mint(db, NATIVE_MINT, None, NATIVE_MINT_DECIMALS)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="reward-center", description=__doc__.splitlines()[0])
    parser.add_argument("--keypair", default=settings.KEYPAIR_PATH, help="JSON keypair file")
    parser.add_argument("--database-url", default=settings.DATABASE_URL)
    parser.add_argument("--log-level", default=settings.LOG_LEVEL)
    sub = parser.add_subparsers(dest="command", required=True)

    p_create = sub.add_parser("create-reward-center")
    p_create.add_argument("--auction-house", default=None)
    p_create.add_argument("--mint-rewards", default=None)
    p_create.add_argument("--config", default="reward_center.json")

    p_withdraw = sub.add_parser("withdraw-auction-house-treasury")
    p_withdraw.add_argument("--auction-house", required=True)
    p_withdraw.add_argument("--amount", required=True, type=int)
    return parser


async def run(args: argparse.Namespace) -> None:
    keypair = load_keypair(args.keypair)
    engine = build_engine(args.database_url)
    try:
        commands = AdminCommands(TransactionExecutor(build_session_factory(engine)), keypair)
        if args.command == "create-reward-center":
            await commands.create_reward_center(args.auction_house, args.mint_rewards, args.config)
        elif args.command == "withdraw-auction-house-treasury":
            await commands.withdraw_auction_house_treasury(args.auction_house, args.amount)
    finally:
        await engine.dispose()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        asyncio.run(run(args))
    except AppError as exc:
        print(f"error [{exc.kind.value} {exc.code}]: {exc.message}", file=sys.stderr)
        return 1
    except Exception as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
