"""
Pure domain layer.

This module contains value objects and policy shapes with NO
dependencies on:
- Storage
- Message dispatch
- Time/clock
- I/O

All domain objects are deterministic; only CoinSet is mutable, and only
by its exclusive owner.
"""

from payout_kernel.domain.authorized import Authorized, AuthorizedKind, AuthorizedMsg
from payout_kernel.domain.coins import (
    MAX_AMOUNT,
    Coin,
    CoinSet,
    parse_unsigned,
    validate_amount,
    validate_denom,
)
from payout_kernel.domain.identity import (
    Addr,
    IdentityValidator,
    validate_identities,
    validate_identity,
)

__all__ = [
    "Addr",
    "Authorized",
    "AuthorizedKind",
    "AuthorizedMsg",
    "Coin",
    "CoinSet",
    "IdentityValidator",
    "MAX_AMOUNT",
    "parse_unsigned",
    "validate_amount",
    "validate_denom",
    "validate_identities",
    "validate_identity",
]
