"""
Module: payout_engines.distribution
Responsibility:
    Split a multi-denomination balance among beneficiaries according to
    basis-point claims, producing one payout instruction that pays every
    beneficiary and conserves value exactly.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import payout_kernel and sibling engine modules.

Invariants enforced:
    - CLAIM_CEILING: total claimed basis points never exceed
      BPS_DENOMINATOR (100000 = 100%); checked before any payout is computed.
    - VALUE_CONSERVATION: sum of payout outputs == input balance for every
      denomination; the floor-division remainder and any unclaimed share go
      to the first beneficiary.
    - DETERMINISTIC_ORDER: beneficiaries are visited sorted by their string
      form, so replays assign the remainder identically.
    - Copy-on-write: ``with_remainder_to`` and ``distribute_coins`` never
      mutate the distribution or the input balance.

Failure modes:
    - InvalidInputError on a claim outside [0, BPS_DENOMINATOR].
    - FundsOverclaimedError when claims sum past 100%.
    - FundsUnclaimedError when distributing with no beneficiaries.
    - MathOverflowError / MathUnderflowError from ledger arithmetic.
    - InternalInvariantError if beneficiaries exist but no output was built.

Usage:
    from payout_engines.distribution import Claim, Distribution
    from payout_kernel.domain.coins import CoinSet
    from payout_kernel.domain.identity import Addr

    distribution = Distribution({Addr("alice"): Claim(60000), Addr("bob"): Claim(40000)})
    instruction = distribution.distribute_coins(
        sender=Addr("treasury"),
        funds=CoinSet.of(utoken=1000),
    )
"""

from __future__ import annotations

from collections.abc import Hashable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Generic, TypeVar

from payout_engines.ledger_math import (
    checked_add,
    checked_div,
    checked_mul,
    sum_coin_sets,
    try_minus_mut,
    try_plus_mut,
)
from payout_engines.tracer import traced_engine
from payout_kernel.domain.coins import CoinSet, parse_unsigned, validate_amount
from payout_kernel.domain.identity import IdentityValidator, validate_identity
from payout_kernel.exceptions import (
    CoinsMismatchError,
    FundsOverclaimedError,
    FundsUnclaimedError,
    InternalInvariantError,
    InvalidInputError,
)
from payout_kernel.logging_config import get_logger

logger = get_logger("engines.distribution")

# 100% in basis points.
BPS_DENOMINATOR: int = 100_000

T = TypeVar("T", bound=Hashable)


def _identity_sort_key(identity: Any) -> tuple[str, str]:
    return (str(identity), repr(identity))


@dataclass(frozen=True, slots=True)
class Claim:
    """
    A proportional share of a balance, in basis points.

    Contract:
        ``bps`` is an int in [0, BPS_DENOMINATOR]; 100000 means 100%.
    Guarantees:
        - ``claim_amount(total) <= total`` and is monotonic in ``total``.
        - ``claim(funds)`` keeps every denomination of ``funds``.
    """

    bps: int

    def __post_init__(self) -> None:
        if isinstance(self.bps, bool) or not isinstance(self.bps, int):
            raise InvalidInputError("claim", f"bps must be an integer, got {self.bps!r}")
        if not 0 <= self.bps <= BPS_DENOMINATOR:
            raise InvalidInputError(
                "claim", f"bps must be within [0, {BPS_DENOMINATOR}], got {self.bps}"
            )

    def claim_amount(self, total: int) -> int:
        """``floor(total * bps / BPS_DENOMINATOR)`` with a widened product."""
        validate_amount(total)
        product = checked_mul(total, self.bps)
        return checked_div(product, BPS_DENOMINATOR)

    def claim(self, funds: CoinSet) -> CoinSet:
        """This claim's share of every denomination in ``funds``."""
        claimed = CoinSet()
        for denom, amount in funds.items():
            claimed[denom] = self.claim_amount(amount)
        return claimed

    def __str__(self) -> str:
        return f"{self.bps}bps"


@dataclass(frozen=True)
class PayoutOutput(Generic[T]):
    """Coins owed to one recipient."""

    recipient: T
    coins: CoinSet

    def __post_init__(self) -> None:
        object.__setattr__(self, "coins", self.coins.copy())

    def to_dict(self) -> dict[str, Any]:
        return {
            "recipient": str(self.recipient),
            "coins": [coin.to_dict() for coin in self.coins.to_coins()],
        }


@dataclass(frozen=True)
class PayoutInstruction(Generic[T]):
    """
    A single outbound payment: ``funds`` from ``sender`` to every output.

    Contract:
        Data only; the surrounding runtime executes the transfers.
    Guarantees:
        - VALUE_CONSERVATION: non-zero per-denomination sums of ``outputs``
          equal ``funds`` (checked on construction).
    """

    sender: T
    funds: CoinSet
    outputs: tuple[PayoutOutput[T], ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "funds", self.funds.copy())
        object.__setattr__(self, "outputs", tuple(self.outputs))
        paid = sum_coin_sets([output.coins for output in self.outputs])
        if paid.to_coins() != self.funds.to_coins():
            raise CoinsMismatchError(inputs=str(self.funds), outputs=str(paid))

    @property
    def recipients(self) -> tuple[T, ...]:
        return tuple(output.recipient for output in self.outputs)

    def amount_for(self, recipient: T) -> CoinSet:
        """Total coins paid to ``recipient`` (empty if not a recipient)."""
        total = CoinSet()
        for output in self.outputs:
            if output.recipient == recipient:
                try_plus_mut(total, output.coins)
        return total

    def to_dict(self) -> dict[str, Any]:
        return {
            "sender": str(self.sender),
            "inputs": [coin.to_dict() for coin in self.funds.to_coins()],
            "outputs": [output.to_dict() for output in self.outputs],
        }


class Distribution(Generic[T]):
    """
    Beneficiary -> Claim mapping with split logic.

    Contract:
        Immutable once constructed; derivations return new instances.
    Guarantees:
        - One claim per beneficiary (mapping keys).
        - The empty distribution is valid but cannot distribute; it differs
          from a non-empty distribution whose claims sum to zero.
        - Claims are summed and checked lazily, on every ``total_bps()``.
    Non-goals:
        - Does not validate identities; build through ``DistributionMsg``
          when starting from raw strings.
        - Does not execute transfers; see ``PayoutInstruction``.
    """

    __slots__ = ("_claims",)

    def __init__(self, claims: Mapping[T, Claim | int] | None = None):
        normalized: dict[T, Claim] = {}
        for beneficiary, claim in (claims or {}).items():
            normalized[beneficiary] = claim if isinstance(claim, Claim) else Claim(claim)
        self._claims: Mapping[T, Claim] = MappingProxyType(normalized)

    @classmethod
    def empty(cls) -> Distribution[T]:
        return cls()

    @property
    def claims(self) -> Mapping[T, Claim]:
        """Read-only view of the claims."""
        return self._claims

    @property
    def is_empty(self) -> bool:
        return not self._claims

    def beneficiaries(self) -> tuple[T, ...]:
        """Beneficiaries in payout order (sorted by string form)."""
        return tuple(sorted(self._claims, key=_identity_sort_key))

    def total_bps(self) -> int:
        """Sum of all claims; raises FundsOverclaimedError past 100%."""
        total = 0
        for claim in self._claims.values():
            total += claim.bps
        if total > BPS_DENOMINATOR:
            raise FundsOverclaimedError(total_bps=total, max_bps=BPS_DENOMINATOR)
        return total

    def with_remainder_to(self, beneficiary: T) -> Distribution[T]:
        """New distribution with the unclaimed share given to ``beneficiary``.

        The remainder is added to an existing claim or becomes a new one.
        The result always totals exactly 100%.
        """
        remainder = BPS_DENOMINATOR - self.total_bps()
        claims = dict(self._claims)
        current = claims.get(beneficiary)
        if current is None:
            claims[beneficiary] = Claim(remainder)
        else:
            claims[beneficiary] = Claim(
                checked_add(current.bps, remainder, limit=BPS_DENOMINATOR)
            )
        logger.debug("distribution_remainder_assigned", extra={
            "beneficiary": str(beneficiary),
            "remainder_bps": remainder,
            "existing_claim": current is not None,
        })
        return Distribution(claims)

    @traced_engine("distribution", "1.0", fingerprint_fields=("sender", "funds"))
    def distribute_coins(self, sender: T, funds: CoinSet) -> PayoutInstruction[T]:
        """
        Split ``funds`` among all beneficiaries.

        Preconditions:
            - At least one beneficiary (else FundsUnclaimedError).
            - Claims total at most 100% (else FundsOverclaimedError).
        Postconditions:
            - One output per beneficiary, in ``beneficiaries()`` order.
            - Whatever proportional shares leave over (floor truncation and
              any unclaimed basis points) is paid to the first beneficiary.
            - Outputs sum to ``funds`` for every denomination.
        """
        if not self._claims:
            logger.warning("distribution_unclaimed", extra={
                "sender": str(sender),
                "funds": funds.to_dict(),
            })
            raise FundsUnclaimedError()

        total_bps = self.total_bps()
        logger.info("distribution_started", extra={
            "sender": str(sender),
            "funds": funds.to_dict(),
            "beneficiary_count": len(self._claims),
            "total_bps": total_bps,
        })

        remaining = funds.copy()
        claimed: list[tuple[T, CoinSet]] = []
        for beneficiary in self.beneficiaries():
            share = self._claims[beneficiary].claim(funds)
            try_minus_mut(remaining, share)
            claimed.append((beneficiary, share))

        if not claimed:
            logger.error("distribution_no_outputs", extra={
                "beneficiary_count": len(self._claims),
            })
            raise InternalInvariantError(
                "distribution_outputs",
                "claims are not empty but claimed funds are empty",
            )

        # Remainder to first beneficiary
        remainder_to, first_share = claimed[0]
        try_plus_mut(first_share, remaining)

        instruction = PayoutInstruction(
            sender=sender,
            funds=funds,
            outputs=tuple(PayoutOutput(recipient=b, coins=c) for b, c in claimed),
        )

        logger.info("distribution_completed", extra={
            "sender": str(sender),
            "output_count": len(instruction.outputs),
            "remainder_to": str(remainder_to),
            "remainder": remaining.to_dict(),
        })
        return instruction

    def to_msg(self) -> DistributionMsg:
        return DistributionMsg({str(b): self._claims[b].bps for b in self.beneficiaries()})

    # Mapping-style access

    def __len__(self) -> int:
        return len(self._claims)

    def __iter__(self) -> Iterator[T]:
        return iter(self.beneficiaries())

    def __contains__(self, beneficiary: object) -> bool:
        return beneficiary in self._claims

    def __getitem__(self, beneficiary: T) -> Claim:
        return self._claims[beneficiary]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Distribution):
            return NotImplemented
        return dict(self._claims) == dict(other._claims)

    def __hash__(self) -> int:
        return hash(frozenset(self._claims.items()))

    def __repr__(self) -> str:
        inner = ", ".join(f"{b!r}: {self._claims[b].bps}" for b in self.beneficiaries())
        return f"Distribution({{{inner}}})"


class DistributionMsg:
    """Unvalidated distribution keyed by raw address strings.

    This is the form configuration and persisted state carry.  ``validate``
    turns it into a ``Distribution`` keyed by validated identities.
    """

    __slots__ = ("_claims",)

    def __init__(self, claims: Mapping[str, Claim | int] | None = None):
        normalized: dict[str, Claim] = {}
        for raw, claim in (claims or {}).items():
            normalized[str(raw)] = claim if isinstance(claim, Claim) else Claim(claim)
        self._claims: Mapping[str, Claim] = MappingProxyType(normalized)

    @property
    def claims(self) -> Mapping[str, Claim]:
        return self._claims

    def validate(self, validator: IdentityValidator[T]) -> Distribution[T]:
        """Validate every address; two raw strings naming one identity is an error."""
        claims: dict[T, Claim] = {}
        for raw in sorted(self._claims):
            identity = validate_identity(validator, raw)
            if identity in claims:
                raise InvalidInputError(
                    "distribution", f"duplicate beneficiary after validation: {raw}"
                )
            claims[identity] = self._claims[raw]
        return Distribution(claims)

    def to_dict(self) -> dict[str, int]:
        return {raw: self._claims[raw].bps for raw in sorted(self._claims)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DistributionMsg:
        claims: dict[str, Claim] = {}
        for raw, bps in data.items():
            if isinstance(bps, str):
                bps = parse_unsigned(bps, "claim")
            claims[str(raw)] = Claim(bps)
        return cls(claims)

    def __len__(self) -> int:
        return len(self._claims)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DistributionMsg):
            return NotImplemented
        return dict(self._claims) == dict(other._claims)

    __hash__ = None

    def __repr__(self) -> str:
        return f"DistributionMsg({self.to_dict()!r})"
