"""Pytest configuration and fixtures."""

import pytest

from stableswap.types import AssetReserve
from tests.helpers import (
    BALANCED_POOL,
    EQUAL_POOL,
    HIGH_PRECISION_POOL,
    MIXED_POOL,
    make_reserves,
)


@pytest.fixture
def equal_pool() -> list[AssetReserve]:
    """Five 12-decimal assets holding 10_000 units each."""
    return make_reserves(EQUAL_POOL)


@pytest.fixture
def mixed_pool() -> list[AssetReserve]:
    """Assets with 6, 6 and 18 decimals."""
    return make_reserves(MIXED_POOL)


@pytest.fixture
def high_precision_pool() -> list[AssetReserve]:
    """The mixed pool with every asset at 18 decimals."""
    return make_reserves(HIGH_PRECISION_POOL)


@pytest.fixture
def balanced_pool() -> list[AssetReserve]:
    """Five 12-decimal assets holding 10^16 units each."""
    return make_reserves(BALANCED_POOL)
