"""Program-derived address (PDA) derivation.

Every program-owned record lives at an address computed from stable seeds
plus the owning program id. The derivation is the ed25519 off-curve search
implemented by solders, so addresses match what the on-ledger programs use
and no private key exists for any of them.

All functions take and return base58 address strings.
"""

from dataclasses import dataclass
from typing import Final

from solders.pubkey import Pubkey

from src.rc_common.errors import AddressMismatchError

REWARD_CENTER_PROGRAM_ID: Final[Pubkey] = Pubkey.from_string(
    "RwDDvPp7ta9qqUwxbBfShsNreBaSsKvFcHzMxfBC3Ki"
)
AUCTION_HOUSE_PROGRAM_ID: Final[Pubkey] = Pubkey.from_string(
    "hausS13jsjafwWwGqZTUQRmWyvyxn9EQpqMwV1PBBmk"
)
TOKEN_METADATA_PROGRAM_ID: Final[Pubkey] = Pubkey.from_string(
    "metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s"
)
TOKEN_PROGRAM_ID: Final[Pubkey] = Pubkey.from_string(
    "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
)
ASSOCIATED_TOKEN_PROGRAM_ID: Final[Pubkey] = Pubkey.from_string(
    "ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL"
)
NATIVE_MINT: Final[str] = "So11111111111111111111111111111111111111112"

REWARD_CENTER_SEED: Final[bytes] = b"reward_center"
LISTING_SEED: Final[bytes] = b"listing"
OFFER_SEED: Final[bytes] = b"offer"
METADATA_SEED: Final[bytes] = b"metadata"
AUCTION_HOUSE_SEED: Final[bytes] = b"auction_house"
TREASURY_SEED: Final[bytes] = b"treasury"
SIGNER_SEED: Final[bytes] = b"signer"


def _key(address: str) -> bytes:
    return bytes(Pubkey.from_string(address))


def _u64_le(value: int) -> bytes:
    return value.to_bytes(8, "little")


def _find(seeds: list[bytes], program_id: Pubkey) -> tuple[str, int]:
    pda, bump = Pubkey.find_program_address(seeds, program_id)
    return str(pda), bump


@dataclass(frozen=True)
class ProgramAuthority:
    """Signing authority of a PDA, proven by its seeds instead of a secret key.

    The program hands this to external programs (the auction house) when it
    acts as the PDA; the receiver re-derives the address to verify it.
    """

    program_id: str
    seeds: tuple[bytes, ...]
    bump: int

    @property
    def address(self) -> str:
        pda = Pubkey.create_program_address(
            [*self.seeds, bytes([self.bump])], Pubkey.from_string(self.program_id)
        )
        return str(pda)


# --- reward center program ---

def find_reward_center_address(auction_house: str) -> tuple[str, int]:
    return _find([REWARD_CENTER_SEED, _key(auction_house)], REWARD_CENTER_PROGRAM_ID)


def reward_center_authority(auction_house: str, bump: int) -> ProgramAuthority:
    return ProgramAuthority(
        program_id=str(REWARD_CENTER_PROGRAM_ID),
        seeds=(REWARD_CENTER_SEED, _key(auction_house)),
        bump=bump,
    )


def find_listing_address(seller: str, metadata: str, reward_center: str) -> tuple[str, int]:
    return _find(
        [LISTING_SEED, _key(seller), _key(metadata), _key(reward_center)],
        REWARD_CENTER_PROGRAM_ID,
    )


def find_offer_address(buyer: str, metadata: str, reward_center: str) -> tuple[str, int]:
    return _find(
        [OFFER_SEED, _key(buyer), _key(metadata), _key(reward_center)],
        REWARD_CENTER_PROGRAM_ID,
    )


# --- token and metadata programs ---

def find_associated_token_address(owner: str, mint: str) -> str:
    return _find(
        [_key(owner), bytes(TOKEN_PROGRAM_ID), _key(mint)], ASSOCIATED_TOKEN_PROGRAM_ID
    )[0]


def find_metadata_address(mint: str) -> str:
    return _find(
        [METADATA_SEED, bytes(TOKEN_METADATA_PROGRAM_ID), _key(mint)],
        TOKEN_METADATA_PROGRAM_ID,
    )[0]


# --- auction house program ---

def find_auction_house_address(authority: str, treasury_mint: str) -> tuple[str, int]:
    return _find(
        [AUCTION_HOUSE_SEED, _key(authority), _key(treasury_mint)], AUCTION_HOUSE_PROGRAM_ID
    )


def find_auction_house_treasury_address(auction_house: str) -> str:
    return _find(
        [AUCTION_HOUSE_SEED, _key(auction_house), TREASURY_SEED], AUCTION_HOUSE_PROGRAM_ID
    )[0]


def find_program_as_signer_address() -> str:
    return _find([AUCTION_HOUSE_SEED, SIGNER_SEED], AUCTION_HOUSE_PROGRAM_ID)[0]


def find_escrow_payment_address(auction_house: str, wallet: str) -> str:
    return _find(
        [AUCTION_HOUSE_SEED, _key(auction_house), _key(wallet)], AUCTION_HOUSE_PROGRAM_ID
    )[0]


def find_trade_state_address(
    wallet: str,
    auction_house: str,
    token_account: str | None,
    treasury_mint: str,
    token_mint: str,
    price: int,
    token_size: int,
) -> str:
    """Trade state of one side of a sale.

    A public bid (`token_account=None`) is not bound to a specific holder's
    account, so it never collides with a private bid on the same token.
    """
    seeds = [AUCTION_HOUSE_SEED, _key(wallet), _key(auction_house)]
    if token_account is not None:
        seeds.append(_key(token_account))
    seeds += [_key(treasury_mint), _key(token_mint), _u64_le(price), _u64_le(token_size)]
    return _find(seeds, AUCTION_HOUSE_PROGRAM_ID)[0]


def assert_address(label: str, expected: str, supplied: str) -> None:
    """Reject a caller-supplied account that is not the derived one."""
    if expected != supplied:
        raise AddressMismatchError(label, expected, supplied)


def validate_address(value: str) -> str:
    """Pydantic validator: accept only well-formed base58 32-byte addresses."""
    try:
        Pubkey.from_string(value)
    except ValueError as exc:
        raise ValueError(f"Invalid address: {value!r}") from exc
    return value
