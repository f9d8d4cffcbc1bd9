"""
Identity -- validated addresses and the validator capability.

Responsibility
--------------
Defines ``Addr``, the identity type used for policy members and
distribution beneficiaries, and ``IdentityValidator``, the narrow
interface through which raw strings become identities.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  Syntactic address rules
belong to the surrounding runtime; this module never decides them.  It
only routes raw strings through a validator supplied by the caller.

Invariants enforced
-------------------
* Identities used as distribution keys or policy members have passed
  through an ``IdentityValidator``.
* Collaborator failures surface as ``InvalidInputError`` with
  ``kind="address"``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol, TypeVar, runtime_checkable

from payout_kernel.exceptions import InvalidInputError

IdentityT = TypeVar("IdentityT")
IdentityT_co = TypeVar("IdentityT_co", covariant=True)


@dataclass(frozen=True, slots=True, order=True)
class Addr:
    """A validated address.

    Only an ``IdentityValidator`` should construct these from untrusted
    input.  Ordering follows the string form.
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value:
            raise InvalidInputError("address", f"empty or non-string value {self.value!r}")

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"Addr({self.value!r})"


@runtime_checkable
class IdentityValidator(Protocol[IdentityT_co]):
    """Turns raw strings into identities, or raises InvalidInputError."""

    def validate(self, raw: str) -> IdentityT_co: ...


def validate_identity(validator: IdentityValidator[IdentityT], raw: str) -> IdentityT:
    """Validate one raw identity through the collaborator.

    ``InvalidInputError`` from the validator passes through unchanged; any
    other ``ValueError`` or ``TypeError`` is reported as an invalid address.
    """
    try:
        return validator.validate(raw)
    except InvalidInputError:
        raise
    except (ValueError, TypeError) as exc:
        raise InvalidInputError("address", str(exc)) from exc


def validate_identities(
    validator: IdentityValidator[IdentityT],
    raws: Iterable[str],
) -> list[IdentityT]:
    """Validate a sequence of raw identities, preserving order."""
    return [validate_identity(validator, raw) for raw in raws]
