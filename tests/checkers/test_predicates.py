# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Predicate catalog: defaults, molds and pass/fail tables."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date, timedelta
from typing import TypedDict

import pytest

from valerie import InvalidArgumentError, Mold, Result, ResultMap


def entry(key, message, code):
    return ResultMap.from_entry(key, [Result(message, code)])


class Colour(enum.Enum):
    A = 1
    B = 2
    C = 3


@dataclass
class Point:
    x: int
    y: int


class Name(TypedDict):
    first: str
    last: str


class TestMold:
    def test_from_mapping_ignores_predicate_parameters(self):
        mold = Mold.from_options({"key": "k", "pattern": "x"}, code="C")
        assert mold == Mold(key="k", msg=None, code="C")

    def test_with_defaults_only_fills_unset_fields(self):
        mold = Mold(key="k").with_defaults(key="other", msg="m")
        assert mold == Mold(key="k", msg="m")

    def test_rejects_unsupported_mold(self):
        with pytest.raises(InvalidArgumentError):
            Mold.from_options(["k"])  # type: ignore[arg-type]

    def test_message_may_be_computed_from_value(self, ctx):
        mold = Mold(key="k", msg=lambda value, context: f"{value} is not truthy", code="C")
        assert mold.result_map([], ctx) == entry("k", "[] is not truthy", "C")


class TestNullChecks:
    @pytest.mark.parametrize("value", ["valid", "", 0, False, []])
    def test_is_not_null_passes_for_falsy_values(self, checkers, value):
        assert checkers.is_not_null(key="required")(value).is_clean()

    def test_is_not_null_reports_null(self, checkers):
        assert checkers.is_not_null(key="required")(None) == entry(
            "required", "required field cannot be null", Result.REQUIRED_FIELD
        )

    @pytest.mark.parametrize("value", ["bad", "", 0, {}])
    def test_is_null(self, checkers, value):
        check = checkers.is_null(key="required")
        assert check(None).is_clean()
        assert check(value) == entry("required", "field must be null", Result.ILLEGAL_VALUE)


class TestIsInstanceOf:
    @pytest.mark.parametrize(
        "value, type_, expected",
        [
            (None, str, "is not of type str"),
            ("test", str, None),
            ("test", int, "is not of type int"),
            ([], list, None),
            ([], dict, "is not of type dict"),
            (1, (str, float), "is not of type str or float"),
        ],
    )
    def test_type_table(self, checkers, value, type_, expected):
        result = checkers.is_instance_of(type_, key="type")(value)
        if expected is None:
            assert result.is_clean()
        else:
            assert result == entry("type", expected, Result.ILLEGAL_VALUE)

    def test_rejects_non_type(self, checkers):
        with pytest.raises(InvalidArgumentError):
            checkers.is_instance_of("str", key="type")


class TestIsOneOf:
    @pytest.mark.parametrize(
        "value, allowed, expected",
        [
            ("any", ["any"], None),
            ([], ["any"], "is not one of allowed values: [any]"),
            ({}, [{}], None),
            ([], [[]], None),
            ([], [["test"]], "is not one of allowed values: [['test']]"),
            (1, [2, 4], "is not one of allowed values: [2, 4]"),
            (2, [2, 4], None),
            (None, [None], None),
        ],
    )
    def test_membership(self, checkers, value, allowed, expected):
        result = checkers.is_one_of(allowed, key="value")(value)
        if expected is None:
            assert result.is_clean()
        else:
            assert result == entry("value", expected, Result.ILLEGAL_VALUE)

    @pytest.mark.parametrize("value, clean", [(Colour.A, True), ("C", True), ("D", False), (1, False)])
    def test_enum_accepts_members_and_names(self, checkers, value, clean):
        result = checkers.is_one_of(Colour, key="value")(value)
        assert result.is_clean() is clean
        if not clean:
            assert result == entry("value", "is not one of allowed values: [A, B, C]", Result.ILLEGAL_VALUE)


class TestMatchesRe:
    @pytest.mark.parametrize(
        "value, pattern, clean",
        [
            (None, r"\d+", True),
            ("21", r"\d+", True),
            ("", r"\d+", False),
            ("yes", r"y\w+", True),
            ("oyeah", r"y\w+", False),
            (123, r"\d+", True),
            (["1"], r"\d+", False),
            (["1"], r".*\d.*", True),
        ],
    )
    def test_full_match_of_string_form(self, checkers, value, pattern, clean):
        result = checkers.matches_re(pattern, key="value")(value)
        assert result.is_clean() is clean
        if not clean:
            assert result == entry("value", "does not match required pattern", Result.ILLEGAL_VALUE)

    def test_invalid_pattern_fails_at_construction(self, checkers):
        with pytest.raises(InvalidArgumentError):
            checkers.matches_re("([", key="value")


class TestRanges:
    @pytest.mark.parametrize("value, clean", [(4, True), (5, True), (6, False), (None, True), ("x", False)])
    def test_has_value_lte(self, checkers, value, clean):
        result = checkers.has_value_lte(5, key="val", msg="should be less than max")(value)
        assert result.is_clean() is clean
        if not clean:
            assert result == entry("val", "should be less than max", Result.ILLEGAL_VALUE)

    def test_has_value_lte_with_dates(self, checkers):
        today = date.today()
        check = checkers.has_value_lte(today, key="val")
        assert check(today - timedelta(days=1)).is_clean()
        assert check(today + timedelta(days=1)) == entry(
            "val", f"should not be greater than {today}", Result.ILLEGAL_VALUE
        )

    def test_has_value_gte_default_message(self, checkers):
        assert checkers.has_value_gte(3, key="val")(2) == entry("val", "should not be less than 3", Result.ILLEGAL_VALUE)
        assert checkers.has_value_gte(3, key="val")(3).is_clean()

    @pytest.mark.parametrize("value, clean", [("abc", True), ("abcdef", False), ([1] * 5, True), (None, True), (3, False)])
    def test_has_size_lte(self, checkers, value, clean):
        result = checkers.has_size_lte(5, key="size")(value)
        assert result.is_clean() is clean
        if not clean:
            assert result == entry("size", "should be no longer than 5", Result.TOO_LONG)

    def test_has_size_gte(self, checkers):
        check = checkers.has_size_gte(1, key="size")
        assert check("a").is_clean()
        assert check("") == entry("size", "should be no shorter than 1", Result.TOO_SHORT)

    @pytest.mark.parametrize("size", [-1, 1.5, None, True])
    def test_invalid_size_fails_at_construction(self, checkers, size):
        with pytest.raises(InvalidArgumentError):
            checkers.has_size_lte(size, key="size")


class TestFields:
    def test_has_member(self, checkers):
        check = checkers.has_member("id", key="obj")
        assert check({"id": None}).is_clean()
        assert check(None).is_clean()
        assert check({"name": 1}) == entry("obj", "is missing required member id", Result.REQUIRED_FIELD)
        assert not check(["id"]).is_clean()

    def test_has_only_fields_in_names(self, checkers):
        check = checkers.has_only_fields_in(["a", "b"], key="obj")
        assert check({"a": 1}).is_clean()
        assert check({"a": 1, "c": 2, "d": 3}) == entry(
            "obj", "contains fields not in [a, b]: [c, d]", Result.ILLEGAL_FIELD
        )

    def test_has_only_fields_in_dataclass(self, checkers):
        check = checkers.has_only_fields_in(Point, key="obj")
        assert check({"x": 1, "y": 2}).is_clean()
        assert check({"x": 1, "z": 2}) == entry("obj", "contains fields not in Point: [z]", Result.ILLEGAL_FIELD)

    def test_has_only_fields_in_typed_dict(self, checkers):
        assert checkers.has_only_fields_in(Name, key="obj")({"first": "a"}).is_clean()

    def test_has_only_fields_in_rejects_bad_declaration(self, checkers):
        with pytest.raises(InvalidArgumentError):
            checkers.has_only_fields_in("ab", key="obj")


class TestSatisfiesAndFail:
    def test_satisfies_uses_mold(self, checkers):
        check = checkers.satisfies(lambda value, context: value, key="invalid", msg="uh oh", code="BAD_VALUE")
        assert check(True).is_clean()
        assert check(False) == entry("invalid", "uh oh", "BAD_VALUE")

    @pytest.mark.parametrize("value", [False, None, 0, "", []])
    def test_satisfies_with_on_fail(self, checkers, value):
        failure = entry("fail", "fail", "fail")
        check = checkers.satisfies(lambda v, context: v, on_fail=lambda v, context: failure)
        assert check(True).is_clean()
        assert check(value) == failure

    def test_satisfies_without_key_raises_when_failure_is_built(self, checkers):
        check = checkers.satisfies(lambda value, context: value, msg="m", code="C")
        assert check(True).is_clean()
        with pytest.raises(InvalidArgumentError):
            check(False)

    def test_fail_and_pass(self, checkers):
        assert checkers.fail()(1) == entry("fail", "failed because you said so", Result.ILLEGAL_VALUE)
        assert checkers.pass_()(None).is_clean()

    def test_caller_mold_overrides_defaults(self, checkers):
        check = checkers.is_not_null({"key": "k", "msg": "needed"}, code="MISSING")
        assert check(None) == entry("k", "needed", "MISSING")
