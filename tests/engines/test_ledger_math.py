"""
Tests for checked ledger arithmetic.

Covers:
- Scalar checked add / sub / mul / div
- CoinSet +/- CoinSet and CoinSet +/- Coin, mutating and non-mutating
- Traversal rules for denominations absent from the left operand
- All-or-nothing behaviour on failure
"""

import pytest

from payout_engines.ledger_math import (
    WIDE_MAX,
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
from payout_kernel.domain.coins import MAX_AMOUNT, Coin, CoinSet
from payout_kernel.exceptions import (
    MathDivByZeroError,
    MathOverflowError,
    MathUnderflowError,
)


class TestScalarChecks:
    def test_add(self):
        assert checked_add(2, 3) == 5

    def test_add_at_max(self):
        assert checked_add(MAX_AMOUNT - 1, 1) == MAX_AMOUNT

    def test_add_overflow(self):
        with pytest.raises(MathOverflowError) as exc_info:
            checked_add(MAX_AMOUNT, 1, "uatom")
        assert exc_info.value.code == "MATH_OVERFLOW"
        assert exc_info.value.denom == "uatom"

    def test_add_custom_limit(self):
        with pytest.raises(MathOverflowError):
            checked_add(6, 5, limit=10)

    def test_sub(self):
        assert checked_sub(5, 5) == 0

    def test_sub_underflow(self):
        with pytest.raises(MathUnderflowError) as exc_info:
            checked_sub(3, 5)
        assert exc_info.value.code == "MATH_UNDERFLOW"

    def test_mul_uses_wide_range(self):
        assert checked_mul(MAX_AMOUNT, 100_000) == MAX_AMOUNT * 100_000

    def test_mul_overflow_past_wide(self):
        with pytest.raises(MathOverflowError):
            checked_mul(WIDE_MAX, 2)

    def test_div_floors(self):
        assert checked_div(7, 2) == 3

    def test_div_by_zero(self):
        with pytest.raises(MathDivByZeroError) as exc_info:
            checked_div(1, 0)
        assert exc_info.value.code == "MATH_DIV_BY_ZERO"


class TestPlus:
    def test_coin_set_plus_coin_set(self):
        result = try_plus(CoinSet.of(a=1, b=2), CoinSet.of(a=10, b=20))
        assert result == {"a": 11, "b": 22}

    def test_coin_set_plus_coin(self):
        assert try_plus(CoinSet.of(a=1), Coin("a", 4)) == {"a": 5}

    def test_absent_denom_inserted(self):
        assert try_plus(CoinSet.of(a=1), CoinSet.of(b=5)) == {"a": 1, "b": 5}
        assert try_plus(CoinSet.of(a=1), Coin("b", 5)) == {"a": 1, "b": 5}

    def test_non_mutating_leaves_receiver(self):
        balance = CoinSet.of(a=1)
        try_plus(balance, CoinSet.of(a=1, b=1))
        assert balance == {"a": 1}

    def test_mutating(self):
        balance = CoinSet.of(a=1)
        assert try_plus_mut(balance, CoinSet.of(a=2, c=3)) is None
        assert balance == {"a": 3, "c": 3}

    def test_mutating_with_coin(self):
        balance = CoinSet.of(a=1)
        try_plus_mut(balance, Coin("a", 9))
        assert balance == {"a": 10}

    def test_overflow_is_all_or_nothing(self):
        balance = CoinSet({"a": 1, "z": MAX_AMOUNT})
        with pytest.raises(MathOverflowError) as exc_info:
            try_plus_mut(balance, CoinSet({"a": 5, "z": 1}))
        assert exc_info.value.denom == "z"
        assert balance == {"a": 1, "z": MAX_AMOUNT}

    def test_non_mutating_overflow(self):
        with pytest.raises(MathOverflowError):
            try_plus(CoinSet({"a": MAX_AMOUNT}), Coin("a", 1))

    def test_rejects_other_operand_types(self):
        with pytest.raises(TypeError):
            try_plus(CoinSet(), {"a": 1})


class TestMinus:
    def test_coin_set_minus_coin_set(self):
        assert try_minus(CoinSet.of(a=5, b=5), CoinSet.of(a=2, b=5)) == {"a": 3, "b": 0}

    def test_coin_set_minus_coin(self):
        assert try_minus(CoinSet.of(a=5), Coin("a", 5)) == {"a": 0}

    def test_underflow(self):
        with pytest.raises(MathUnderflowError):
            try_minus(CoinSet.of(a=3), CoinSet.of(a=5))

    def test_absent_denom_is_noop(self):
        assert try_minus(CoinSet.of(a=3), CoinSet.of(b=5)) == {"a": 3}
        assert try_minus(CoinSet.of(a=3), Coin("b", 5)) == {"a": 3}

    def test_mutating(self):
        balance = CoinSet.of(a=5, b=1)
        try_minus_mut(balance, CoinSet.of(a=5))
        assert balance == {"a": 0, "b": 1}

    def test_mutating_with_coin(self):
        balance = CoinSet.of(a=5)
        try_minus_mut(balance, Coin("a", 2))
        assert balance == {"a": 3}

    def test_underflow_is_all_or_nothing(self):
        balance = CoinSet.of(a=10, b=1)
        with pytest.raises(MathUnderflowError):
            try_minus_mut(balance, CoinSet.of(a=4, b=2))
        assert balance == {"a": 10, "b": 1}

    def test_non_mutating_leaves_receiver(self):
        balance = CoinSet.of(a=10)
        try_minus(balance, Coin("a", 3))
        assert balance == {"a": 10}


class TestSumCoinSets:
    def test_sum(self):
        total = sum_coin_sets([CoinSet.of(a=1), CoinSet.of(a=2, b=3), CoinSet()])
        assert total == {"a": 3, "b": 3}

    def test_empty(self):
        assert sum_coin_sets([]) == CoinSet()

    def test_overflow(self):
        with pytest.raises(MathOverflowError):
            sum_coin_sets([CoinSet({"a": MAX_AMOUNT}), CoinSet({"a": 1})])
