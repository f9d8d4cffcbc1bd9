"""
Kernel Invariants Contract.

These invariants are structural law for every payout computed by the
engines. No configuration or policy may switch them off.

This module exists solely to declare these invariants explicitly. The
enforcement is distributed across the coin value types, the ledger
arithmetic, and the distribution engine.
"""

from enum import Enum, unique


@unique
class KernelInvariant(str, Enum):
    """Non-configurable invariants enforced by the kernel.

    Each value names one structural guarantee. Configuration decides *who*
    is paid and in what share, never *whether* these rules apply.
    """

    VALUE_CONSERVATION = "value_conservation"
    """A payout instruction's outputs sum to its inputs for every
    denomination. Enforced by PayoutInstruction construction."""

    NON_NEGATIVE_AMOUNTS = "non_negative_amounts"
    """Coin amounts are integers in [0, MAX_AMOUNT]. Enforced by Coin and
    CoinSet construction and by checked ledger arithmetic."""

    CLAIM_CEILING = "claim_ceiling"
    """A distribution never claims more than 100% of a balance. Enforced by
    Distribution.total_bps before any payout is computed."""

    DETERMINISTIC_ORDER = "deterministic_order"
    """Beneficiaries are visited in sorted identity order, so the rounding
    remainder always lands on the same beneficiary."""

    ALL_OR_NOTHING = "all_or_nothing"
    """Failed arithmetic leaves no partial mutation behind. Enforced by
    staging results in ledger_math before commit."""


ALL_KERNEL_INVARIANTS: frozenset[KernelInvariant] = frozenset(KernelInvariant)

# The kernel package may not import from these packages.
# Enforced by tests/architecture/test_kernel_boundary.py.
FORBIDDEN_KERNEL_IMPORTS: tuple[str, ...] = (
    "payout_engines",
    "payout_config",
)
