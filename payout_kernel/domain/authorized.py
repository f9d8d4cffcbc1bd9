"""
Authorization policy types (``payout_kernel.domain.authorized``).

Responsibility
--------------
Pure value objects describing *who* may perform a protected action.  The
policy is a closed sum of four shapes:

    NONE  -- nobody
    ONE   -- exactly one identity
    MANY  -- a fixed set of identities
    ANY   -- everybody

The quantified checks (single requestor, any-of, all-of, at-least-N)
live in ``payout_engines.authorization``; this module only holds data.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.  May import
only from ``domain/identity`` and ``exceptions``.

Invariants enforced
-------------------
* Shape consistency -- NONE and ANY carry no members, ONE carries
  exactly one, MANY carries at least one, with no duplicates.
* ANY is never inferred: ``from_identities`` maps 0/1/N identities to
  NONE/ONE/MANY, and only ``Authorized.anyone()`` yields ANY.
* Immutability -- frozen dataclass; members stored as a tuple.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from payout_kernel.domain.identity import IdentityValidator, validate_identities
from payout_kernel.exceptions import InvalidInputError

T = TypeVar("T")


class AuthorizedKind(str, Enum):
    """Shape of an authorization policy."""

    NONE = "none"
    ONE = "one"
    MANY = "many"
    ANY = "any"


def _dedupe(identities: Iterable[T]) -> tuple[T, ...]:
    # equality scan; identities need not be hashable
    unique: list[T] = []
    for identity in identities:
        if identity not in unique:
            unique.append(identity)
    return tuple(unique)


@dataclass(frozen=True)
class Authorized(Generic[T]):
    """
    Authorization policy value.

    Contract:
        Construct through the classmethods; ``kind`` and ``members`` must
        agree (checked in ``__post_init__``).
    Guarantees:
        - ``members`` is empty for NONE and ANY.
        - ``members`` has exactly one entry for ONE.
        - ``members`` is non-empty and duplicate-free for MANY.
    Non-goals:
        - No membership logic here; see ``payout_engines.authorization``.

    Identities need equality and ``str()`` only; they are compared, never
    hashed.
    """

    kind: AuthorizedKind
    members: tuple[T, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.kind, AuthorizedKind):
            object.__setattr__(self, "kind", AuthorizedKind(self.kind))
        object.__setattr__(self, "members", tuple(self.members))

        match self.kind:
            case AuthorizedKind.NONE | AuthorizedKind.ANY:
                if self.members:
                    raise InvalidInputError(
                        "authorized",
                        f"{self.kind.value} policy takes no members",
                    )
            case AuthorizedKind.ONE:
                if len(self.members) != 1:
                    raise InvalidInputError(
                        "authorized",
                        f"one policy takes exactly one member, got {len(self.members)}",
                    )
            case AuthorizedKind.MANY:
                if not self.members:
                    raise InvalidInputError("authorized", "many policy needs members")
                if len(_dedupe(self.members)) != len(self.members):
                    raise InvalidInputError("authorized", "many policy has duplicate members")

    @classmethod
    def nobody(cls) -> Authorized[T]:
        return cls(AuthorizedKind.NONE)

    @classmethod
    def anyone(cls) -> Authorized[T]:
        return cls(AuthorizedKind.ANY)

    @classmethod
    def one(cls, identity: T) -> Authorized[T]:
        return cls(AuthorizedKind.ONE, (identity,))

    @classmethod
    def many(cls, identities: Iterable[T]) -> Authorized[T]:
        """Fixed set policy; duplicates collapse, first-seen order is kept."""
        return cls(AuthorizedKind.MANY, _dedupe(identities))

    @classmethod
    def from_identities(cls, identities: Iterable[T]) -> Authorized[T]:
        """Infer NONE / ONE / MANY from the number of distinct identities."""
        members = _dedupe(identities)
        if not members:
            return cls.nobody()
        if len(members) == 1:
            return cls.one(members[0])
        return cls(AuthorizedKind.MANY, members)

    def to_msg(self) -> AuthorizedMsg:
        return AuthorizedMsg(
            kind=self.kind.value,
            members=tuple(str(member) for member in self.members),
        )

    def __str__(self) -> str:
        if not self.members:
            return self.kind.value
        return f"{self.kind.value}({', '.join(str(m) for m in self.members)})"


@dataclass(frozen=True)
class AuthorizedMsg:
    """Unvalidated, string-keyed form of an ``Authorized`` policy.

    This is what configuration and persisted state carry; ``validate``
    routes every member through the identity validator.
    """

    kind: str
    members: tuple[str, ...] = ()

    def validate(self, validator: IdentityValidator[T]) -> Authorized[T]:
        try:
            kind = AuthorizedKind(self.kind)
        except ValueError as exc:
            raise InvalidInputError("authorized kind", repr(self.kind)) from exc
        # two raw strings may name one identity; collapse like Authorized.many
        return Authorized(kind, _dedupe(validate_identities(validator, self.members)))

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "members": list(self.members)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AuthorizedMsg:
        """Parse ``{"kind": ..., "members": [...]}``.

        A bare member list (no ``kind``) infers the shape the same way
        ``Authorized.from_identities`` does.
        """
        raw_members = data.get("members", ())
        if raw_members is None:
            raw_members = ()
        if isinstance(raw_members, (str, bytes)) or not isinstance(raw_members, Iterable):
            raise InvalidInputError(
                "authorized members",
                f"expected a list, got {type(raw_members).__name__}: {raw_members!r}",
            )
        members = tuple(str(m) for m in raw_members)
        kind = data.get("kind")
        if kind is None:
            distinct = len(set(members))
            kind = "none" if distinct == 0 else "one" if distinct == 1 else "many"
            members = _dedupe(members)
        return cls(kind=str(kind), members=members)
