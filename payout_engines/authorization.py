"""
payout_engines.authorization -- Pure authorization policy evaluation.

Responsibility:
    Decide whether a requestor, or a group of requestors, satisfies an
    ``Authorized`` policy under one of four quantifiers: single, any-of,
    all-of, at-least-N.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import payout_kernel types.

Invariants enforced:
    - Exhaustive dispatch: every check matches on ``AuthorizedKind``;
      adding a shape without handling it here raises immediately.
    - NONE never admits a single requestor; ANY always does.
    - Quantifiers are total: each returns normally on success or raises
      ``UnauthorizedError``; there is no partial outcome.

Edge cases:
    - ``authorize_all`` with no requestors succeeds (vacuous truth).
    - ``authorize_at_least`` with ``min_count == 0`` succeeds for every
      policy, including NONE.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

from payout_kernel.domain.authorized import Authorized, AuthorizedKind
from payout_kernel.exceptions import InvalidInputError, UnauthorizedError
from payout_kernel.logging_config import get_logger

logger = get_logger("engines.authorization")

T = TypeVar("T")


def is_authorized(policy: Authorized[T], requestor: T) -> bool:
    """Single-requestor test shared by every quantifier."""
    match policy.kind:
        case AuthorizedKind.NONE:
            return False
        case AuthorizedKind.ANY:
            return True
        case AuthorizedKind.ONE:
            return policy.members[0] == requestor
        case AuthorizedKind.MANY:
            return requestor in policy.members
        case _:
            raise ValueError(f"Unknown authorization policy kind: {policy.kind}")


def _deny(policy: Authorized[T], check: str, requestor: T | None = None) -> UnauthorizedError:
    logger.info("authorization_denied", extra={
        "check": check,
        "policy_kind": policy.kind.value,
        "requestor": None if requestor is None else str(requestor),
    })
    return UnauthorizedError(
        policy_kind=policy.kind.value,
        requestor=None if requestor is None else str(requestor),
    )


def authorize(policy: Authorized[T], requestor: T) -> None:
    """Require ``requestor`` to satisfy ``policy``."""
    if not is_authorized(policy, requestor):
        raise _deny(policy, "authorize", requestor)


def authorize_any(policy: Authorized[T], requestors: Sequence[T]) -> None:
    """Require at least one of ``requestors`` to satisfy ``policy``."""
    if not any(is_authorized(policy, r) for r in requestors):
        raise _deny(policy, "authorize_any")


def authorize_all(policy: Authorized[T], requestors: Sequence[T]) -> None:
    """Require every one of ``requestors`` to satisfy ``policy``.

    An empty ``requestors`` sequence is vacuously authorized.
    """
    for requestor in requestors:
        if not is_authorized(policy, requestor):
            raise _deny(policy, "authorize_all", requestor)


def authorize_at_least(
    policy: Authorized[T],
    requestors: Sequence[T],
    min_count: int,
) -> None:
    """Require at least ``min_count`` of ``requestors`` to satisfy ``policy``.

    Each entry of ``requestors`` counts once per occurrence; callers that
    collect signers should de-duplicate first.
    """
    if min_count < 0:
        raise InvalidInputError("min_count", f"must not be negative: {min_count}")
    count = sum(1 for r in requestors if is_authorized(policy, r))
    if count < min_count:
        logger.info("authorization_quorum_short", extra={
            "policy_kind": policy.kind.value,
            "authorized_count": count,
            "min_count": min_count,
        })
        raise _deny(policy, "authorize_at_least")
