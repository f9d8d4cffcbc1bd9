"""
Module: payout_engines.ledger_math
Responsibility:
    Checked integer arithmetic and checked add/subtract over coin sets
    (balances), in both non-mutating and mutating forms.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import payout_kernel.

Invariants enforced:
    - NON_NEGATIVE_AMOUNTS: every result amount lies in [0, MAX_AMOUNT];
      nothing saturates or wraps.
    - ALL_OR_NOTHING: results are staged for every denomination before any
      is written, so a failing mutating call leaves its receiver untouched
      and a failing non-mutating call returns nothing.

Traversal rules (right-hand operand drives the loop):
    - Add: a denomination missing from the left operand is inserted with
      the right operand's amount.
    - Subtract: a denomination missing from the left operand is skipped;
      subtracting more than is held is an underflow.

Failure modes:
    - MathOverflowError when an amount would exceed MAX_AMOUNT.
    - MathUnderflowError when an amount would go negative.
    - MathDivByZeroError on division by zero.

Usage:
    from payout_engines.ledger_math import try_plus, try_minus_mut
    from payout_kernel.domain.coins import Coin, CoinSet

    total = try_plus(CoinSet.of(uatom=5), Coin("uatom", 3))
    try_minus_mut(total, CoinSet.of(uatom=8))
"""

from __future__ import annotations

from payout_kernel.domain.coins import MAX_AMOUNT, Coin, CoinSet
from payout_kernel.exceptions import (
    MathDivByZeroError,
    MathOverflowError,
    MathUnderflowError,
)
from payout_kernel.logging_config import get_logger

logger = get_logger("engines.ledger_math")

# Widened intermediate range for products (unsigned 256-bit).
WIDE_MAX: int = 2**256 - 1

Operand = CoinSet | Coin


# ---------------------------------------------------------------------------
# Scalar operations
# ---------------------------------------------------------------------------


def checked_add(a: int, b: int, denom: str | None = None, limit: int = MAX_AMOUNT) -> int:
    result = a + b
    if result > limit:
        raise MathOverflowError("add", denom)
    return result


def checked_sub(a: int, b: int, denom: str | None = None) -> int:
    if b > a:
        raise MathUnderflowError("sub", denom)
    return a - b


def checked_mul(a: int, b: int, denom: str | None = None, limit: int = WIDE_MAX) -> int:
    result = a * b
    if result > limit:
        raise MathOverflowError("mul", denom)
    return result


def checked_div(a: int, b: int) -> int:
    """Floor division of non-negative ints."""
    if b == 0:
        raise MathDivByZeroError("div")
    return a // b


# ---------------------------------------------------------------------------
# Coin set operations
# ---------------------------------------------------------------------------


def _operand_items(other: Operand) -> list[tuple[str, int]]:
    if isinstance(other, Coin):
        return [(other.denom, other.amount)]
    if isinstance(other, CoinSet):
        return list(other.items())
    raise TypeError(f"Expected Coin or CoinSet, got {type(other).__name__}")


def _stage_plus(balance: CoinSet, other: Operand) -> dict[str, int]:
    staged: dict[str, int] = {}
    for denom, amount in _operand_items(other):
        try:
            staged[denom] = checked_add(balance.get(denom, 0), amount, denom)
        except MathOverflowError:
            logger.warning("ledger_add_overflow", extra={
                "denom": denom,
                "held": str(balance.get(denom, 0)),
                "added": str(amount),
            })
            raise
    return staged


def _stage_minus(balance: CoinSet, other: Operand) -> dict[str, int]:
    staged: dict[str, int] = {}
    for denom, amount in _operand_items(other):
        if denom not in balance:
            continue
        try:
            staged[denom] = checked_sub(balance[denom], amount, denom)
        except MathUnderflowError:
            logger.warning("ledger_sub_underflow", extra={
                "denom": denom,
                "held": str(balance[denom]),
                "subtracted": str(amount),
            })
            raise
    return staged


def _commit(balance: CoinSet, staged: dict[str, int]) -> None:
    for denom, amount in staged.items():
        balance[denom] = amount


def try_plus(balance: CoinSet, other: Operand) -> CoinSet:
    """Return ``balance + other``; ``balance`` is not modified."""
    result = balance.copy()
    _commit(result, _stage_plus(balance, other))
    return result


def try_plus_mut(balance: CoinSet, other: Operand) -> None:
    """Add ``other`` into ``balance`` in place (all-or-nothing)."""
    _commit(balance, _stage_plus(balance, other))


def try_minus(balance: CoinSet, other: Operand) -> CoinSet:
    """Return ``balance - other``; ``balance`` is not modified."""
    result = balance.copy()
    _commit(result, _stage_minus(balance, other))
    return result


def try_minus_mut(balance: CoinSet, other: Operand) -> None:
    """Subtract ``other`` from ``balance`` in place (all-or-nothing)."""
    _commit(balance, _stage_minus(balance, other))


def sum_coin_sets(coin_sets: list[CoinSet]) -> CoinSet:
    """Checked per-denomination sum of several coin sets."""
    total = CoinSet()
    for coins in coin_sets:
        try_plus_mut(total, coins)
    return total
