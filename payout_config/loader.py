"""
Configuration Loader (``payout_config.loader``).

Responsibility
--------------
Loads a YAML payout configuration file and parses it into the
``PayoutConfigDef`` source artifact.  No identity validation happens
here; ``payout_config.build_payout_config`` does that.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass or message form.
* Claims are parsed into ``Claim`` values, so an out-of-range basis-point
  value fails at load time.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Wrongly shaped sections or claim values  -> ``InvalidInputError``.

Expected layout::

    name: treasury-split
    version: 1
    admins:
      kind: many
      members: [addr-alice, addr-bob]
    distribution:
      claims:
        addr-alice: 60000
        addr-bob: 30000
      remainder_to: addr-carol
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from payout_config.schema import PayoutConfigDef
from payout_engines.distribution import DistributionMsg
from payout_kernel.domain.authorized import AuthorizedMsg
from payout_kernel.domain.coins import parse_unsigned
from payout_kernel.exceptions import InvalidInputError


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_admins(data: Any) -> AuthorizedMsg:
    """Parse the ``admins`` section.

    Accepts either ``{kind, members}`` or a bare list of addresses, whose
    length decides the shape (0 -> none, 1 -> one, more -> many).
    """
    if isinstance(data, list):
        return AuthorizedMsg.from_dict({"members": data})
    if isinstance(data, dict):
        return AuthorizedMsg.from_dict(data)
    raise InvalidInputError("admins", f"expected mapping or list, got {type(data).__name__}")


def parse_distribution(data: Any) -> tuple[DistributionMsg, str | None]:
    """Parse the ``distribution`` section into claims and remainder target."""
    if not isinstance(data, dict):
        raise InvalidInputError(
            "distribution", f"expected mapping, got {type(data).__name__}"
        )
    claims = data.get("claims") or {}
    if not isinstance(claims, dict):
        raise InvalidInputError(
            "distribution claims", f"expected mapping, got {type(claims).__name__}"
        )
    remainder_to = data.get("remainder_to")
    return DistributionMsg.from_dict(claims), (
        str(remainder_to) if remainder_to is not None else None
    )


def parse_version(value: Any) -> int:
    """Accept an int or a digit string; anything else is InvalidInputError."""
    if isinstance(value, str):
        return parse_unsigned(value.strip(), "version")
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidInputError("version", f"expected unsigned integer, got {value!r}")
    return value


def parse_payout_config(data: dict[str, Any]) -> PayoutConfigDef:
    """
    Parse a ``PayoutConfigDef`` from a dict.

    Raises:
        KeyError: if ``name`` or ``admins`` is missing.
        InvalidInputError: if a section is wrongly shaped.
    """
    distribution, remainder_to = parse_distribution(data.get("distribution", {}))
    return PayoutConfigDef(
        name=data["name"],
        version=parse_version(data.get("version", 1)),
        admins=parse_admins(data["admins"]),
        distribution=distribution,
        remainder_to=remainder_to,
    )


def config_to_dict(definition: PayoutConfigDef) -> dict[str, Any]:
    """Canonical dict form of a definition (inverse of parse_payout_config)."""
    distribution: dict[str, Any] = {"claims": definition.distribution.to_dict()}
    if definition.remainder_to is not None:
        distribution["remainder_to"] = definition.remainder_to
    return {
        "name": definition.name,
        "version": definition.version,
        "admins": definition.admins.to_dict(),
        "distribution": distribution,
    }


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
