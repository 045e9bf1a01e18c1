"""Tests for the admin CLI config loading and submit retry."""

import json

import pytest
from solders.keypair import Keypair
from sqlalchemy.exc import OperationalError

from src.rc_cli.config import DEFAULT_RULES, load_keypair, load_reward_rules
from src.rc_cli.main import build_parser, submit_with_retry
from src.rc_common.enums import PayoutOperation
from src.rc_common.errors import InvalidPriceError


class TestLoadRewardRules:
    def test_missing_file_uses_defaults(self, tmp_path) -> None:
        assert load_reward_rules(str(tmp_path / "absent.json")) == DEFAULT_RULES
        assert load_reward_rules(None) == DEFAULT_RULES

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Divide", PayoutOperation.DIVIDE),
            ("Multiply", PayoutOperation.MULTIPLY),
            ("Multiple", PayoutOperation.MULTIPLY),
            ("DIVIDE", PayoutOperation.DIVIDE),
        ],
    )
    def test_operand_names(self, tmp_path, name: str, expected: PayoutOperation) -> None:
        path = tmp_path / "reward_center.json"
        path.write_text(
            json.dumps(
                {
                    "mathematical_operand": name,
                    "payout_numeral": 2,
                    "seller_reward_payout_basis_points": 500,
                }
            )
        )
        rules = load_reward_rules(str(path))
        assert rules.mathematical_operand == expected
        assert rules.payout_numeral == 2

    def test_unknown_operand_rejected(self, tmp_path) -> None:
        path = tmp_path / "reward_center.json"
        path.write_text(
            json.dumps(
                {
                    "mathematical_operand": "Modulo",
                    "payout_numeral": 2,
                    "seller_reward_payout_basis_points": 500,
                }
            )
        )
        with pytest.raises(ValueError):
            load_reward_rules(str(path))


class TestLoadKeypair:
    def test_reads_json_byte_array(self, tmp_path) -> None:
        keypair = Keypair()
        path = tmp_path / "id.json"
        path.write_text(json.dumps(list(bytes(keypair))))
        assert load_keypair(str(path)).pubkey() == keypair.pubkey()


class TestSubmitWithRetry:
    async def test_retries_transient_then_succeeds(self) -> None:
        calls = 0

        async def submit() -> str:
            nonlocal calls
            calls += 1
            if calls < 3:
                raise OperationalError("SELECT 1", {}, Exception("connection reset"))
            return "ok"

        assert await submit_with_retry("op", submit, attempts=3, backoff_ms=0) == "ok"
        assert calls == 3

    async def test_gives_up_after_attempts(self) -> None:
        calls = 0

        async def submit() -> None:
            nonlocal calls
            calls += 1
            raise TimeoutError("slow")

        with pytest.raises(TimeoutError):
            await submit_with_retry("op", submit, attempts=2, backoff_ms=0)
        assert calls == 2

    async def test_program_errors_not_retried(self) -> None:
        calls = 0

        async def submit() -> None:
            nonlocal calls
            calls += 1
            raise InvalidPriceError(0)

        with pytest.raises(InvalidPriceError):
            await submit_with_retry("op", submit, attempts=5, backoff_ms=0)
        assert calls == 1


class TestParser:
    def test_create_defaults(self) -> None:
        args = build_parser().parse_args(["create-reward-center"])
        assert args.auction_house is None
        assert args.mint_rewards is None
        assert args.config == "reward_center.json"

    def test_withdraw_requires_amount(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["withdraw-auction-house-treasury", "--auction-house", "x"])
