"""Test helpers module for shared test utilities.

- constants: Pool parameters shared across tests
- factories: Reserve factory functions
"""

from tests.helpers.constants import (
    BALANCED_POOL,
    BALANCED_POOL_ISSUANCE,
    EQUAL_POOL,
    EQUAL_POOL_AMP,
    EQUAL_POOL_BOOTSTRAP_SHARES,
    EQUAL_POOL_D,
    EQUAL_POOL_DEPOSITED,
    EQUAL_POOL_DEPOSITED_D,
    HIGH_PRECISION_POOL,
    HIGH_PRECISION_POOL_D,
    MIXED_POOL,
    MIXED_POOL_AMP,
    ONE_18,
)
from tests.helpers.factories import make_reserves, make_uniform_reserves, with_amount_at

__all__ = [
    # Constants
    "ONE_18",
    "EQUAL_POOL",
    "EQUAL_POOL_AMP",
    "EQUAL_POOL_D",
    "EQUAL_POOL_DEPOSITED",
    "EQUAL_POOL_DEPOSITED_D",
    "EQUAL_POOL_BOOTSTRAP_SHARES",
    "MIXED_POOL",
    "MIXED_POOL_AMP",
    "HIGH_PRECISION_POOL",
    "HIGH_PRECISION_POOL_D",
    "BALANCED_POOL",
    "BALANCED_POOL_ISSUANCE",
    # Factories
    "make_reserves",
    "make_uniform_reserves",
    "with_amount_at",
]
