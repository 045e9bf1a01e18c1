"""Integration-test fixtures.

`market` builds a complete marketplace in a fresh database: a wSOL-priced
auction house (2% fee), a reward center over it with a funded treasury, one
NFT held by the seller and a funded buyer.
"""

import pytest_asyncio

from tests.integration.marketplace import Marketplace, build_marketplace


@pytest_asyncio.fixture
async def market(session_factory) -> Marketplace:
    return await build_marketplace(session_factory)
