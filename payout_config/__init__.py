"""
payout_config -- public entrypoint for payout configuration.

Responsibility:
    Turns a YAML payout configuration (admin policy, distribution claims,
    optional remainder beneficiary) into a validated ``PayoutConfig``.
    Every address is routed through the caller's ``IdentityValidator``;
    this package never decides address syntax itself.

Architecture position:
    Configuration -- sits above ``payout_kernel`` and ``payout_engines``.
    Neither of those may import from ``payout_config``.

Invariants enforced:
    - The returned distribution has passed ``total_bps()``, so an
      over-claimed configuration never reaches a payout.
    - Deterministic checksum: the same source always yields the same
      ``PayoutConfig.checksum``.

Failure modes:
    - ``FileNotFoundError`` / ``yaml.YAMLError`` / ``KeyError`` from the loader.
    - ``InvalidInputError`` for addresses or values failing validation.
    - ``FundsOverclaimedError`` when claims sum past 100%.

Audit relevance:
    Every successful build emits a ``PAYOUT_CONFIG_TRACE`` log record with
    the config name, version, checksum, admin policy kind and
    beneficiary count.
"""

from __future__ import annotations

from collections.abc import Hashable
from pathlib import Path
from typing import TypeVar

from payout_config.loader import (
    compute_checksum,
    config_to_dict,
    load_yaml_file,
    parse_payout_config,
)
from payout_config.schema import PayoutConfig, PayoutConfigDef
from payout_kernel.domain.identity import IdentityValidator, validate_identity
from payout_kernel.logging_config import get_logger

_logger = get_logger("config")

T = TypeVar("T", bound=Hashable)


def build_payout_config(
    definition: PayoutConfigDef,
    validator: IdentityValidator[T],
) -> PayoutConfig[T]:
    """Validate a parsed definition into a runtime ``PayoutConfig``."""
    admins = definition.admins.validate(validator)
    distribution = definition.distribution.validate(validator)
    if definition.remainder_to is not None:
        distribution = distribution.with_remainder_to(
            validate_identity(validator, definition.remainder_to)
        )
    total_bps = distribution.total_bps()

    config = PayoutConfig(
        name=definition.name,
        version=definition.version,
        admins=admins,
        distribution=distribution,
        checksum=compute_checksum(config_to_dict(definition)),
    )

    _logger.info(
        "PAYOUT_CONFIG_TRACE",
        extra={
            "trace_type": "PAYOUT_CONFIG_TRACE",
            "config_name": config.name,
            "config_version": config.version,
            "checksum": config.checksum,
            "admin_policy": admins.kind.value,
            "beneficiary_count": len(distribution),
            "total_bps": total_bps,
        },
    )
    return config


def load_payout_config(path: Path | str, validator: IdentityValidator[T]) -> PayoutConfig[T]:
    """Load, parse and validate a YAML payout configuration file."""
    return build_payout_config(parse_payout_config(load_yaml_file(Path(path))), validator)


__all__ = [
    "PayoutConfig",
    "PayoutConfigDef",
    "build_payout_config",
    "compute_checksum",
    "load_payout_config",
    "parse_payout_config",
]
