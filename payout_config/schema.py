"""
Payout configuration schema.

Defines the human-authored source artifact for a payout configuration and
the validated runtime artifact built from it.

Key distinction:
  PayoutConfigDef = source artifact (raw address strings, as authored)
  PayoutConfig    = runtime artifact (validated identities, checked totals)
"""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass
from typing import Generic, TypeVar

from payout_engines.distribution import Distribution, DistributionMsg
from payout_kernel.domain.authorized import Authorized, AuthorizedMsg

T = TypeVar("T", bound=Hashable)


@dataclass(frozen=True)
class PayoutConfigDef:
    """A payout configuration as written in YAML."""

    name: str
    admins: AuthorizedMsg
    distribution: DistributionMsg
    remainder_to: str | None = None
    version: int = 1


@dataclass(frozen=True)
class PayoutConfig(Generic[T]):
    """A validated payout configuration.

    ``distribution`` already includes the remainder claim when the source
    named ``remainder_to``, and its total has been checked.
    """

    name: str
    version: int
    admins: Authorized[T]
    distribution: Distribution[T]
    checksum: str
