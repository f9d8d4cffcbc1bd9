"""
Module: payout_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the canonical import surface for the
    transactional handlers that gate and execute payouts.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import payout_kernel (and sibling engine modules).
    MUST NOT import payout_config.

Invariants enforced:
    - Purity: engines never read clocks for their results, never fetch
      balances and never execute transfers.
    - Integer-only arithmetic: amounts are ints checked against
      MAX_AMOUNT; floats never appear.
    - Determinism: identical inputs always produce identical outputs.

Audit relevance:
    ``Distribution.distribute_coins`` is traced via ``@traced_engine``
    (see ``payout_engines.tracer``), emitting PAYOUT_ENGINE_TRACE records
    with engine name, version, input fingerprint, outcome and duration.

Usage:
    from payout_engines import Distribution, Claim, authorize
    from payout_engines.ledger_math import try_plus
"""

from payout_engines.authorization import (
    authorize,
    authorize_all,
    authorize_any,
    authorize_at_least,
    is_authorized,
)
from payout_engines.distribution import (
    BPS_DENOMINATOR,
    Claim,
    Distribution,
    DistributionMsg,
    PayoutInstruction,
    PayoutOutput,
)
from payout_engines.funds import (
    expect_coins,
    expect_coins_exact,
    expect_no_coins,
    fund_set,
)
from payout_engines.ledger_math import (
    checked_add,
    checked_div,
    checked_mul,
    checked_sub,
    sum_coin_sets,
    try_minus,
    try_minus_mut,
    try_plus,
    try_plus_mut,
)
from payout_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    # Authorization
    "authorize",
    "authorize_all",
    "authorize_any",
    "authorize_at_least",
    "is_authorized",
    # Distribution
    "BPS_DENOMINATOR",
    "Claim",
    "Distribution",
    "DistributionMsg",
    "PayoutInstruction",
    "PayoutOutput",
    # Funds
    "expect_coins",
    "expect_coins_exact",
    "expect_no_coins",
    "fund_set",
    # Ledger math
    "checked_add",
    "checked_div",
    "checked_mul",
    "checked_sub",
    "sum_coin_sets",
    "try_minus",
    "try_minus_mut",
    "try_plus",
    "try_plus_mut",
    # Tracer
    "compute_input_fingerprint",
    "traced_engine",
]
