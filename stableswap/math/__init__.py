"""StableSwap math.

Raising implementations of the engine's calculations:
- permill: parts-per-million fee fraction
- scaling: precision normalization
- invariant: amplification helper and the D / Y Newton solvers
- swap: swap calculators
- liquidity: share and withdrawal calculators
"""

from stableswap.math.permill import Permill
from stableswap.math.scaling import Rounding

__all__ = ["Permill", "Rounding"]
