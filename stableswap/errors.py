"""StableSwap error classes.

Every condition the calculators can anticipate maps to one of these kinds.
The raising functions in ``stableswap.math`` surface them directly; the
entry points in ``stableswap.api`` turn them into ``None``.
"""


class StableSwapError(Exception):
    """Base error for StableSwap calculations."""

    pass


class InvalidAssetIndex(StableSwapError):
    """Asset index is outside the reserve sequence or equals its counterpart."""

    pass


class LengthMismatch(StableSwapError):
    """Two reserve sequences describing the same pool differ in length."""

    pass


class ArithmeticOverflow(StableSwapError):
    """An intermediate value left the permitted integer domain."""

    pass


class NonConvergence(StableSwapError):
    """A Newton solver exhausted its iteration budget."""

    pass


class InvariantDidNotConverge(NonConvergence):
    """Newton-Raphson iteration for the invariant D did not converge."""

    pass


class ReserveDidNotConverge(NonConvergence):
    """Newton-Raphson iteration for the unknown reserve Y did not converge."""

    pass


class InvalidState(StableSwapError):
    """Inputs describe a pool state the requested operation cannot act on."""

    pass


class InvalidReserveCount(InvalidState):
    """Reserve sequence is shorter than 2 or longer than the pool capacity."""

    pass
