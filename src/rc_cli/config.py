"""Keypair and reward-rules config loading for the admin CLI."""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import field_validator
from solders.keypair import Keypair

from src.rc_common.enums import PayoutOperation
from src.rc_reward_center.application.schemas import RewardRulesSchema

logger = logging.getLogger(__name__)

_OPERAND_NAMES = {
    "divide": PayoutOperation.DIVIDE,
    "multiply": PayoutOperation.MULTIPLY,
    "multiple": PayoutOperation.MULTIPLY,  # older config files
}

DEFAULT_RULES = RewardRulesSchema(
    mathematical_operand=PayoutOperation.DIVIDE,
    payout_numeral=5,
    seller_reward_payout_basis_points=1000,
)


class RewardRulesConfig(RewardRulesSchema):
    """Rules file as written by hand: `"Divide"`, `"Multiply"` or `"Multiple"`."""

    @field_validator("mathematical_operand", mode="before")
    @classmethod
    def _normalize_operand(cls, value: Any) -> Any:
        if isinstance(value, str) and value.lower() in _OPERAND_NAMES:
            return _OPERAND_NAMES[value.lower()]
        return value


def load_keypair(path: str) -> Keypair:
    """Read a keypair stored as a JSON array of 64 secret-key bytes."""
    with open(Path(path).expanduser(), encoding="utf-8") as fh:
        secret = json.load(fh)
    return Keypair.from_bytes(bytes(secret))


def load_reward_rules(path: str | None) -> RewardRulesSchema:
    if path is None or not Path(path).exists():
        logger.warning(
            "Reward center config %s not found, using defaults %s",
            path,
            DEFAULT_RULES.model_dump(),
        )
        return DEFAULT_RULES
    with open(path, encoding="utf-8") as fh:
        return RewardRulesConfig.model_validate(json.load(fh))
