"""
Coins -- Denomination-keyed amounts.

Responsibility:
    Provides the value types every payout computation is built on: a single
    ``Coin`` (denomination + amount) and a ``CoinSet`` (one amount per
    denomination, a.k.a. a balance).

Architecture position:
    Kernel > Domain -- pure value types, zero I/O.
    Imported by the ledger arithmetic and the distribution engine.

Invariants enforced:
    - NON_NEGATIVE_AMOUNTS: amounts are ints in [0, MAX_AMOUNT]; anything
      else is rejected at construction or assignment.
    - DETERMINISTIC_ORDER: CoinSet iterates in sorted denomination order
      regardless of insertion order.
    - Denominations are unique; a coin list naming one twice is rejected.

Failure modes:
    - InvalidInputError on a bad denomination or an out-of-range amount.
    - CoinsDuplicateError when building a CoinSet from a list that repeats
      a denomination.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from dataclasses import dataclass

from payout_kernel.exceptions import CoinsDuplicateError, InvalidInputError

# Coin amounts are unsigned 128-bit integers.
MAX_AMOUNT: int = 2**128 - 1


def validate_denom(denom: object) -> str:
    """Return ``denom`` if it is a usable denomination string."""
    if not isinstance(denom, str) or not denom.strip():
        raise InvalidInputError("denom", f"expected non-empty string, got {denom!r}")
    if denom != denom.strip():
        raise InvalidInputError("denom", f"surrounding whitespace in {denom!r}")
    return denom


def validate_amount(amount: object, denom: str | None = None) -> int:
    """Return ``amount`` if it is an int in [0, MAX_AMOUNT]."""
    label = f"amount for {denom}" if denom else "amount"
    # bool is an int subclass; True is not an amount
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidInputError(label, f"expected integer, got {type(amount).__name__}")
    if amount < 0:
        raise InvalidInputError(label, f"must not be negative: {amount}")
    if amount > MAX_AMOUNT:
        raise InvalidInputError(label, f"exceeds maximum {MAX_AMOUNT}: {amount}")
    return amount


def parse_unsigned(text: str, kind: str = "amount") -> int:
    """Parse a string of ASCII decimal digits.

    ``str.isdigit`` alone admits characters such as superscripts that
    ``int()`` rejects.
    """
    if not (text.isascii() and text.isdigit()):
        raise InvalidInputError(kind, f"not an unsigned integer: {text!r}")
    return int(text)


@dataclass(frozen=True, slots=True)
class Coin:
    """
    A single denomination and amount.

    Contract:
        Immutable pair; both fields are validated on construction.
    Guarantees:
        - ``denom`` is a non-empty string without surrounding whitespace.
        - ``0 <= amount <= MAX_AMOUNT``.
    """

    denom: str
    amount: int

    def __post_init__(self) -> None:
        validate_denom(self.denom)
        validate_amount(self.amount, self.denom)

    @classmethod
    def of(cls, amount: int | str, denom: str) -> Coin:
        """Factory accepting a decimal-digit string amount."""
        if isinstance(amount, str):
            amount = parse_unsigned(amount)
        return cls(denom=denom, amount=amount)

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    def to_dict(self) -> dict[str, str]:
        return {"denom": self.denom, "amount": str(self.amount)}

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"


class CoinSet(MutableMapping[str, int]):
    """
    Balance: one non-negative amount per denomination.

    Contract:
        A mutable mapping ``denom -> amount`` whose every write is
        validated. Mutation is intended only for the exclusive owner of the
        instance; everything that hands a CoinSet to someone else hands
        over a ``copy()``.
    Guarantees:
        - Iteration, ``items()``, ``denominations`` and ``to_coins()`` are
          all sorted by denomination.
        - Amounts are always within [0, MAX_AMOUNT].
        - Zero amounts are kept as entries; ``to_coins()`` omits them.
    Non-goals:
        - Does not do arithmetic; see ``payout_engines.ledger_math``.
    """

    __slots__ = ("_amounts",)

    def __init__(self, amounts: Mapping[str, int] | None = None):
        self._amounts: dict[str, int] = {}
        if amounts:
            for denom, amount in amounts.items():
                self[denom] = amount

    @classmethod
    def from_coins(cls, coins: Iterable[Coin]) -> CoinSet:
        """Build a CoinSet from a coin list; a repeated denom is an error."""
        result = cls()
        for coin in coins:
            if coin.denom in result._amounts:
                raise CoinsDuplicateError(coin.denom)
            result._amounts[coin.denom] = coin.amount
        return result

    @classmethod
    def of(cls, **amounts: int) -> CoinSet:
        """Shorthand: ``CoinSet.of(uatom=5, utoken=10)``."""
        return cls(amounts)

    # MutableMapping interface

    def __getitem__(self, denom: str) -> int:
        return self._amounts[denom]

    def __setitem__(self, denom: str, amount: int) -> None:
        validate_denom(denom)
        self._amounts[denom] = validate_amount(amount, denom)

    def __delitem__(self, denom: str) -> None:
        del self._amounts[denom]

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._amounts))

    def __len__(self) -> int:
        return len(self._amounts)

    def __contains__(self, denom: object) -> bool:
        return denom in self._amounts

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CoinSet):
            return self._amounts == other._amounts
        if isinstance(other, Mapping):
            return self._amounts == dict(other)
        return NotImplemented

    __hash__ = None  # mutable

    # Value helpers

    @property
    def denominations(self) -> tuple[str, ...]:
        """Sorted denominations, including zero-amount entries."""
        return tuple(sorted(self._amounts))

    @property
    def is_empty(self) -> bool:
        """True when there is no entry with a non-zero amount."""
        return all(amount == 0 for amount in self._amounts.values())

    def copy(self) -> CoinSet:
        clone = CoinSet()
        clone._amounts = dict(self._amounts)
        return clone

    def to_coins(self) -> list[Coin]:
        """Non-zero entries as coins, sorted by denomination."""
        return [
            Coin(denom=denom, amount=self._amounts[denom])
            for denom in self
            if self._amounts[denom] != 0
        ]

    def to_dict(self) -> dict[str, str]:
        """Amounts as decimal strings, for logs and persistence."""
        return {denom: str(self._amounts[denom]) for denom in self}

    def __str__(self) -> str:
        return ",".join(str(coin) for coin in self.to_coins())

    def __repr__(self) -> str:
        inner = ", ".join(f"{denom!r}: {self._amounts[denom]}" for denom in self)
        return f"CoinSet({{{inner}}})"
