"""
payout_engines.funds -- Expectations on funds attached to an action.

Responsibility:
    Turn the coin list attached to an incoming action into a ``CoinSet``
    and check it against what the action requires: at least some coins,
    exactly some coins, or none at all.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Failure modes:
    - CoinsDuplicateError when the attached list repeats a denomination.
    - CoinsInsufficientError / CoinsNotExactError / CoinsNotAllowedError
      when the expectation is not met; ``expect`` carries the required
      coins in ``100uatom,5utoken`` form.
"""

from __future__ import annotations

from collections.abc import Iterable

from payout_kernel.domain.coins import Coin, CoinSet
from payout_kernel.exceptions import (
    CoinsInsufficientError,
    CoinsNotAllowedError,
    CoinsNotExactError,
)


def fund_set(coins: Iterable[Coin]) -> CoinSet:
    """Attached coins as a CoinSet; a repeated denomination is rejected."""
    return CoinSet.from_coins(coins)


def _as_coin_set(coins: CoinSet | Iterable[Coin]) -> CoinSet:
    if isinstance(coins, CoinSet):
        return coins
    return fund_set(coins)


def expect_coins(funds: CoinSet | Iterable[Coin], expected: Iterable[Coin]) -> None:
    """Require at least ``expected`` for every expected denomination."""
    held = _as_coin_set(funds)
    required = fund_set(expected)
    for denom, amount in required.items():
        if held.get(denom, 0) < amount:
            raise CoinsInsufficientError(expect=str(required))


def expect_coins_exact(funds: CoinSet | Iterable[Coin], expected: Iterable[Coin]) -> None:
    """Require the non-zero funds to equal ``expected`` exactly."""
    held = _as_coin_set(funds)
    required = fund_set(expected)
    if held.to_coins() != required.to_coins():
        raise CoinsNotExactError(expect=str(required))


def expect_no_coins(funds: CoinSet | Iterable[Coin]) -> None:
    """Require that no non-zero funds are attached."""
    held = _as_coin_set(funds)
    if not held.is_empty:
        raise CoinsNotAllowedError(received=str(held))
