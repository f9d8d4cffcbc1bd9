"""
Tests for the Authorized policy value and its message form.

Tests cover:
- Shape invariants for NONE / ONE / MANY / ANY
- from_identities inference (0 -> NONE, 1 -> ONE, N -> MANY; never ANY)
- AuthorizedMsg parsing, validation and round trip
"""

import pytest

from payout_kernel.domain.authorized import Authorized, AuthorizedKind, AuthorizedMsg
from payout_kernel.domain.identity import Addr
from payout_kernel.exceptions import InvalidInputError


class TestAuthorizedShapes:
    def test_nobody(self):
        policy = Authorized.nobody()
        assert policy.kind == AuthorizedKind.NONE
        assert policy.members == ()

    def test_anyone(self):
        policy = Authorized.anyone()
        assert policy.kind == AuthorizedKind.ANY
        assert policy.members == ()

    def test_one(self, addr):
        policy = Authorized.one(addr("x"))
        assert policy.kind == AuthorizedKind.ONE
        assert policy.members == (addr("x"),)

    def test_many_collapses_duplicates_in_order(self, addr):
        policy = Authorized.many([addr("y"), addr("x"), addr("y")])
        assert policy.kind == AuthorizedKind.MANY
        assert policy.members == (addr("y"), addr("x"))

    def test_many_requires_members(self):
        with pytest.raises(InvalidInputError):
            Authorized.many([])

    def test_none_with_members_rejected(self, addr):
        with pytest.raises(InvalidInputError):
            Authorized(AuthorizedKind.NONE, (addr("x"),))

    def test_one_with_two_members_rejected(self, addr):
        with pytest.raises(InvalidInputError):
            Authorized(AuthorizedKind.ONE, (addr("x"), addr("y")))

    def test_many_duplicates_rejected_on_direct_construction(self, addr):
        with pytest.raises(InvalidInputError, match="duplicate"):
            Authorized(AuthorizedKind.MANY, (addr("x"), addr("x")))

    def test_kind_coerced_from_string(self):
        assert Authorized("any").kind == AuthorizedKind.ANY

    def test_frozen(self):
        policy = Authorized.anyone()
        with pytest.raises(AttributeError):
            policy.kind = AuthorizedKind.NONE

    def test_str(self, addr):
        assert str(Authorized.nobody()) == "none"
        assert str(Authorized.many([addr("a"), addr("b")])) == "many(addra, addrb)"


class TestFromIdentities:
    def test_zero_is_none(self):
        assert Authorized.from_identities([]).kind == AuthorizedKind.NONE

    def test_one_is_one(self, addr):
        assert Authorized.from_identities([addr("x")]) == Authorized.one(addr("x"))

    def test_repeated_single_is_one(self, addr):
        assert Authorized.from_identities([addr("x"), addr("x")]).kind == AuthorizedKind.ONE

    def test_many_is_many(self, addr):
        policy = Authorized.from_identities([addr("x"), addr("y")])
        assert policy.kind == AuthorizedKind.MANY

    def test_never_any(self, addr):
        for ids in ([], [addr("x")], [addr("x"), addr("y"), addr("z")]):
            assert Authorized.from_identities(ids).kind != AuthorizedKind.ANY


class TestAuthorizedMsg:
    def test_validate(self, validator):
        msg = AuthorizedMsg(kind="many", members=("addrx", "addry"))
        policy = msg.validate(validator)
        assert policy == Authorized.many([Addr("addrx"), Addr("addry")])

    def test_validate_bad_kind(self, validator):
        with pytest.raises(InvalidInputError, match="authorized kind"):
            AuthorizedMsg(kind="some", members=()).validate(validator)

    def test_validate_bad_member(self, validator):
        with pytest.raises(InvalidInputError, match="address"):
            AuthorizedMsg(kind="one", members=("nope",)).validate(validator)

    def test_from_dict_infers_kind(self):
        assert AuthorizedMsg.from_dict({"members": []}).kind == "none"
        assert AuthorizedMsg.from_dict({"members": ["addrx"]}).kind == "one"
        assert AuthorizedMsg.from_dict({"members": ["addrx", "addrx"]}) == AuthorizedMsg(
            kind="one", members=("addrx",)
        )
        assert AuthorizedMsg.from_dict({"members": ["addrx", "addry"]}).kind == "many"

    def test_from_dict_explicit_any(self):
        assert AuthorizedMsg.from_dict({"kind": "any"}) == AuthorizedMsg(kind="any")

    def test_round_trip_through_policy(self, validator):
        policy = Authorized.one(Addr("addrx"))
        msg = AuthorizedMsg.from_dict(policy.to_msg().to_dict())
        assert msg.validate(validator) == policy


class _Handle:
    """Identity with equality but no hash."""

    __hash__ = None

    def __init__(self, name: str):
        self.name = name

    def __eq__(self, other):
        return isinstance(other, _Handle) and other.name == self.name

    def __str__(self):
        return self.name


class TestUnhashableIdentities:
    def test_many_collapses_by_equality(self):
        policy = Authorized.many([_Handle("x"), _Handle("y"), _Handle("x")])
        assert [str(m) for m in policy.members] == ["x", "y"]

    def test_from_identities(self):
        assert Authorized.from_identities([_Handle("x"), _Handle("x")]).kind == AuthorizedKind.ONE

    def test_duplicates_rejected_on_direct_construction(self):
        with pytest.raises(InvalidInputError, match="duplicate"):
            Authorized(AuthorizedKind.MANY, (_Handle("x"), _Handle("x")))


class TestAuthorizedMsgMembers:
    def test_scalar_members_rejected(self):
        with pytest.raises(InvalidInputError, match="expected a list"):
            AuthorizedMsg.from_dict({"kind": "one", "members": "addralice"})

    def test_non_iterable_members_rejected(self):
        with pytest.raises(InvalidInputError):
            AuthorizedMsg.from_dict({"kind": "many", "members": 5})

    def test_null_members_is_empty(self):
        assert AuthorizedMsg.from_dict({"kind": "none", "members": None}).members == ()

    def test_validate_collapses_duplicates_like_many(self, validator):
        msg = AuthorizedMsg(kind="many", members=("addrx", "addry", "addrx"))
        assert msg.validate(validator) == Authorized.many([Addr("addrx"), Addr("addry")])
