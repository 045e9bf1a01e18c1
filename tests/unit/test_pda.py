"""Tests for rc_common.pda — derived addresses and address validation."""

import pytest
from pydantic import BaseModel, ValidationError
from solders.pubkey import Pubkey

from src.rc_common.errors import AddressMismatchError
from src.rc_common.pda import (
    assert_address,
    find_associated_token_address,
    find_listing_address,
    find_offer_address,
    find_reward_center_address,
    find_trade_state_address,
    reward_center_authority,
)
from src.rc_common.types import Address


def _addr() -> str:
    return str(Pubkey.new_unique())


class TestDerivation:
    def test_deterministic(self) -> None:
        house = _addr()
        assert find_reward_center_address(house) == find_reward_center_address(house)

    def test_distinct_inputs_distinct_addresses(self) -> None:
        seller, metadata, rc = _addr(), _addr(), _addr()
        listing, _ = find_listing_address(seller, metadata, rc)
        assert listing != find_listing_address(_addr(), metadata, rc)[0]
        assert listing != find_listing_address(seller, metadata, _addr())[0]

    def test_listing_and_offer_seeds_differ(self) -> None:
        wallet, metadata, rc = _addr(), _addr(), _addr()
        assert find_listing_address(wallet, metadata, rc)[0] != find_offer_address(
            wallet, metadata, rc
        )[0]

    def test_derived_addresses_are_off_curve(self) -> None:
        address, _ = find_reward_center_address(_addr())
        assert not Pubkey.from_string(address).is_on_curve()

    def test_associated_token_address_per_mint(self) -> None:
        owner = _addr()
        assert find_associated_token_address(owner, _addr()) != find_associated_token_address(
            owner, _addr()
        )

    def test_trade_state_depends_on_price(self) -> None:
        args = [_addr() for _ in range(5)]
        assert find_trade_state_address(*args, 1000, 1) != find_trade_state_address(
            *args, 1500, 1
        )

    def test_public_bid_trade_state_differs_from_private(self) -> None:
        wallet, house, token_account, treasury_mint, mint = (_addr() for _ in range(5))
        private = find_trade_state_address(
            wallet, house, token_account, treasury_mint, mint, 1000, 1
        )
        public = find_trade_state_address(wallet, house, None, treasury_mint, mint, 1000, 1)
        assert private != public


class TestProgramAuthority:
    def test_authority_address_is_reward_center(self) -> None:
        house = _addr()
        address, bump = find_reward_center_address(house)
        authority = reward_center_authority(house, bump)
        assert authority.address == address


class TestAssertAddress:
    def test_match(self) -> None:
        address = _addr()
        assert_address("listing", address, address)

    def test_mismatch(self) -> None:
        with pytest.raises(AddressMismatchError):
            assert_address("listing", _addr(), _addr())


class _Accounts(BaseModel):
    listing: Address


class TestAddressField:
    def test_accepts_base58(self) -> None:
        address = _addr()
        assert _Accounts(listing=address).listing == address

    def test_rejects_garbage(self) -> None:
        with pytest.raises(ValidationError):
            _Accounts(listing="not-an-address")
