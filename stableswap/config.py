"""Constants and solver configuration for the StableSwap engine."""

from dataclasses import dataclass

# Largest value representable by a pool balance (u128)
U128_MAX = 2**128 - 1

# Intermediate products are evaluated in a 256-bit domain before being
# narrowed back to u128
U256_MAX = 2**256 - 1

# Internal precision all reserves are rescaled to before any invariant math
TARGET_PRECISION = 18

# Maximum number of assets a single pool snapshot may carry
MAX_RESERVES = 5

# Newton iteration bounds for the invariant (D) and reserve (Y) solvers
MAX_D_ITERATIONS = 128
MAX_Y_ITERATIONS = 64

# Fee fractions are expressed in parts-per-million
PERMILL_DENOMINATOR = 1_000_000


@dataclass(frozen=True)
class StableSwapConfig:
    """Static configuration for the calculators.

    Iteration bounds are fixed per call site rather than tuned at runtime;
    a caller that needs tighter bounds builds its own instance.

    Attributes:
        d_iterations: Iteration bound for the invariant solver (default: 128)
        y_iterations: Iteration bound for the reserve solver (default: 64)
        target_precision: Decimals of the common internal precision (default: 18)
        max_reserves: Capacity of a reserve sequence (default: 5)
    """

    d_iterations: int = MAX_D_ITERATIONS
    y_iterations: int = MAX_Y_ITERATIONS
    target_precision: int = TARGET_PRECISION
    max_reserves: int = MAX_RESERVES

    def __post_init__(self) -> None:
        if self.d_iterations <= 0 or self.y_iterations <= 0:
            raise ValueError("Iteration bounds must be positive")
        if self.max_reserves < 2:
            raise ValueError(f"max_reserves must be at least 2, got {self.max_reserves}")
        if self.target_precision < 0:
            raise ValueError(f"target_precision cannot be negative, got {self.target_precision}")


# Default configuration instance
DEFAULT_CONFIG = StableSwapConfig()
