"""
Tests for Coin and CoinSet value types.

Covers:
- Amount and denomination validation
- Sorted iteration regardless of insertion order
- Duplicate rejection when building from a coin list
- Copy independence and zero-amount handling
"""

import pytest

from payout_kernel.domain.coins import MAX_AMOUNT, Coin, CoinSet
from payout_kernel.exceptions import CoinsDuplicateError, InvalidInputError


class TestCoin:
    """Tests for the single-denomination value."""

    def test_construct(self):
        coin = Coin("uatom", 100)
        assert coin.denom == "uatom"
        assert coin.amount == 100
        assert str(coin) == "100uatom"

    def test_of_parses_digit_string(self):
        assert Coin.of("250", "utoken") == Coin("utoken", 250)

    def test_of_rejects_non_digit_string(self):
        with pytest.raises(InvalidInputError):
            Coin.of("-5", "utoken")

    @pytest.mark.parametrize("amount", ["\u00b2", "\u0661", "1_000", " 5", ""])
    def test_of_rejects_strings_int_would_misread(self, amount):
        with pytest.raises(InvalidInputError):
            Coin.of(amount, "utoken")

    def test_negative_amount_rejected(self):
        with pytest.raises(InvalidInputError, match="negative"):
            Coin("uatom", -1)

    def test_amount_above_max_rejected(self):
        with pytest.raises(InvalidInputError, match="maximum"):
            Coin("uatom", MAX_AMOUNT + 1)

    def test_max_amount_accepted(self):
        assert Coin("uatom", MAX_AMOUNT).amount == MAX_AMOUNT

    def test_bool_amount_rejected(self):
        with pytest.raises(InvalidInputError):
            Coin("uatom", True)

    def test_float_amount_rejected(self):
        with pytest.raises(InvalidInputError):
            Coin("uatom", 1.5)

    @pytest.mark.parametrize("denom", ["", "   ", " uatom", None])
    def test_bad_denom_rejected(self, denom):
        with pytest.raises(InvalidInputError):
            Coin(denom, 1)

    def test_is_frozen(self):
        coin = Coin("uatom", 1)
        with pytest.raises(AttributeError):
            coin.amount = 2


class TestCoinSet:
    """Tests for the denomination-keyed balance."""

    def test_iteration_sorted(self):
        funds = CoinSet({"zeta": 1, "alpha": 2, "mid": 3})
        assert list(funds) == ["alpha", "mid", "zeta"]
        assert funds.denominations == ("alpha", "mid", "zeta")
        assert list(funds.items()) == [("alpha", 2), ("mid", 3), ("zeta", 1)]

    def test_of_shorthand(self):
        assert CoinSet.of(uatom=5) == CoinSet({"uatom": 5})

    def test_from_coins(self):
        funds = CoinSet.from_coins([Coin("b", 2), Coin("a", 1)])
        assert funds == {"a": 1, "b": 2}

    def test_from_coins_duplicate_rejected(self):
        with pytest.raises(CoinsDuplicateError) as exc_info:
            CoinSet.from_coins([Coin("a", 1), Coin("a", 2)])
        assert exc_info.value.denom == "a"
        assert exc_info.value.code == "COINS_DUPLICATE"

    def test_setitem_validates(self):
        funds = CoinSet()
        with pytest.raises(InvalidInputError):
            funds["uatom"] = -3
        assert "uatom" not in funds

    def test_construct_validates(self):
        with pytest.raises(InvalidInputError):
            CoinSet({"uatom": MAX_AMOUNT + 1})

    def test_copy_is_independent(self):
        original = CoinSet.of(uatom=5)
        clone = original.copy()
        clone["uatom"] = 9
        assert original["uatom"] == 5

    def test_zero_entries_kept_but_not_coins(self):
        funds = CoinSet({"a": 0, "b": 4})
        assert funds.denominations == ("a", "b")
        assert funds.to_coins() == [Coin("b", 4)]
        assert str(funds) == "4b"

    def test_is_empty(self):
        assert CoinSet().is_empty
        assert CoinSet({"a": 0}).is_empty
        assert not CoinSet({"a": 1}).is_empty

    def test_to_dict_uses_strings(self):
        assert CoinSet.of(a=MAX_AMOUNT).to_dict() == {"a": str(MAX_AMOUNT)}

    def test_equality_with_mapping(self):
        assert CoinSet.of(a=1) == {"a": 1}
        assert CoinSet.of(a=1) != CoinSet.of(a=2)

    def test_unhashable(self):
        with pytest.raises(TypeError):
            hash(CoinSet())
