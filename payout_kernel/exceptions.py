"""
Typed Exception Hierarchy for the Payout Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Payout handlers move value. A caller that has to parse an error message to
decide whether a split failed because of an over-claimed distribution or an
arithmetic overflow will eventually get it wrong. Every failure in this
package therefore:
  1. Has a TYPED exception class (catch by type, not message)
  2. Has a CODE attribute (machine-readable, API-safe)
  3. Carries structured DATA (not just a message string)

Example - RIGHT way:
    try:
        instruction = distribution.distribute_coins(sender, funds)
    except FundsOverclaimedError as e:
        reject(code=e.code, total_bps=e.total_bps)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from PayoutKernelError:

    PayoutKernelError (base)
    |
    +-- AuthError
    |   +-- UnauthorizedError
    |
    +-- MathError
    |   +-- MathOverflowError
    |   +-- MathUnderflowError
    |   +-- MathDivByZeroError
    |
    +-- FundsError
    |   +-- FundsOverclaimedError
    |   +-- FundsUnclaimedError
    |
    +-- CoinsError
    |   +-- CoinsInsufficientError
    |   +-- CoinsNotExactError
    |   +-- CoinsNotAllowedError
    |   +-- CoinsDuplicateError
    |   +-- CoinsMismatchError
    |
    +-- InvalidInputError
    |
    +-- InternalInvariantError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Auth            | UNAUTHORIZED                | Requestor(s) rejected by policy
----------------|-----------------------------|-----------------------------------------
Math            | MATH_OVERFLOW               | Amount exceeds the coin amount range
                | MATH_UNDERFLOW              | Subtraction would go negative
                | MATH_DIV_BY_ZERO            | Division by a zero denominator
----------------|-----------------------------|-----------------------------------------
Funds           | FUNDS_OVERCLAIMED           | Claims sum past 100%
                | FUNDS_UNCLAIMED             | Distribution has no beneficiaries
----------------|-----------------------------|-----------------------------------------
Coins           | COINS_INSUFFICIENT          | Attached funds below expectation
                | COINS_NOT_EXACT             | Attached funds differ from expectation
                | COINS_NOT_ALLOWED           | Funds attached where none are accepted
                | COINS_DUPLICATE             | Coin list repeats a denomination
                | COINS_MISMATCH              | Payout outputs do not sum to inputs
----------------|-----------------------------|-----------------------------------------
Input           | INVALID_INPUT               | Identity/config failed validation
----------------|-----------------------------|-----------------------------------------
Internal        | INTERNAL_INVARIANT          | Unreachable state reached (bug)

===============================================================================
HANDLING PATTERNS
===============================================================================

1. UnauthorizedError is always recoverable: reject the action, nothing has
   been computed yet.

2. MathError subclasses abort the operation in progress. Non-mutating
   arithmetic returns nothing; mutating arithmetic leaves its receiver
   untouched.

3. InternalInvariantError is a programming error. Do not branch on it as a
   normal outcome; let it reach the invocation boundary.
===============================================================================
"""


class PayoutKernelError(Exception):
    """
    Base exception for all payout kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "PAYOUT_KERNEL_ERROR"


# Authorization


class AuthError(PayoutKernelError):
    """Base exception for authorization errors."""

    code: str = "AUTH_ERROR"


class UnauthorizedError(AuthError):
    """Requestor is not authorized for this action."""

    code: str = "UNAUTHORIZED"

    def __init__(self, policy_kind: str, requestor: str | None = None):
        self.policy_kind = policy_kind
        self.requestor = requestor
        if requestor is None:
            super().__init__(f"Not authorized for this action (policy: {policy_kind})")
        else:
            super().__init__(
                f"Requestor {requestor} is not authorized (policy: {policy_kind})"
            )


# Checked arithmetic


class MathError(PayoutKernelError):
    """Base exception for checked arithmetic errors."""

    code: str = "MATH_ERROR"


class MathOverflowError(MathError):
    """Result exceeds the representable amount range."""

    code: str = "MATH_OVERFLOW"

    def __init__(self, operation: str, denom: str | None = None):
        self.operation = operation
        self.denom = denom
        where = f" for {denom}" if denom else ""
        super().__init__(f"Overflow in math operation: {operation}{where}")


class MathUnderflowError(MathError):
    """Result would be negative."""

    code: str = "MATH_UNDERFLOW"

    def __init__(self, operation: str, denom: str | None = None):
        self.operation = operation
        self.denom = denom
        where = f" for {denom}" if denom else ""
        super().__init__(f"Underflow in math operation: {operation}{where}")


class MathDivByZeroError(MathError):
    """Division by zero."""

    code: str = "MATH_DIV_BY_ZERO"

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Divide by zero in math operation: {operation}")


# Fund claims


class FundsError(PayoutKernelError):
    """Base exception for distribution claim errors."""

    code: str = "FUNDS_ERROR"


class FundsOverclaimedError(FundsError):
    """Sum of claimed basis points exceeds 100%."""

    code: str = "FUNDS_OVERCLAIMED"

    def __init__(self, total_bps: int, max_bps: int):
        self.total_bps = total_bps
        self.max_bps = max_bps
        super().__init__(
            f"Fund claims must not exceed 100%: {total_bps} > {max_bps} bps"
        )


class FundsUnclaimedError(FundsError):
    """Distribution has no beneficiaries."""

    code: str = "FUNDS_UNCLAIMED"

    def __init__(self):
        super().__init__("Fund claims must not be empty")


# Coins


class CoinsError(PayoutKernelError):
    """Base exception for coin set expectation errors."""

    code: str = "COINS_ERROR"


class CoinsInsufficientError(CoinsError):
    """Coins do not meet the expected amount."""

    code: str = "COINS_INSUFFICIENT"

    def __init__(self, expect: str):
        self.expect = expect
        super().__init__(f"Coins must contain at least {expect}")


class CoinsNotExactError(CoinsError):
    """Action requires exact coins."""

    code: str = "COINS_NOT_EXACT"

    def __init__(self, expect: str):
        self.expect = expect
        super().__init__(f"Coins must be exactly {expect}")


class CoinsNotAllowedError(CoinsError):
    """Expected no coins, but received some."""

    code: str = "COINS_NOT_ALLOWED"

    def __init__(self, received: str):
        self.received = received
        super().__init__(f"Coins must not be provided, received {received}")


class CoinsDuplicateError(CoinsError):
    """Coin list contains the same denomination more than once."""

    code: str = "COINS_DUPLICATE"

    def __init__(self, denom: str | None = None):
        self.denom = denom
        super().__init__(f"Coins must not contain duplicates: {denom!r}")


class CoinsMismatchError(CoinsError):
    """Payout outputs do not sum to the payout inputs."""

    code: str = "COINS_MISMATCH"

    def __init__(self, inputs: str, outputs: str):
        self.inputs = inputs
        self.outputs = outputs
        super().__init__(
            f"Input and output coins must have equal values: "
            f"inputs={inputs}, outputs={outputs}"
        )


# Validation


class InvalidInputError(PayoutKernelError):
    """An identity or configuration value failed validation."""

    code: str = "INVALID_INPUT"

    def __init__(self, kind: str, reason: str):
        self.kind = kind
        self.reason = reason
        super().__init__(f"Not a valid {kind}: {reason}")


# Internal


class InternalInvariantError(PayoutKernelError):
    """
    An assertion that upstream checks should make unreachable.

    Signals a programming error, never a normal control-flow outcome.
    """

    code: str = "INTERNAL_INVARIANT"

    def __init__(self, invariant: str, detail: str):
        self.invariant = invariant
        self.detail = detail
        super().__init__(f"Internal invariant violated ({invariant}): {detail}")
