# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Composed checks: evaluation order, empty policies and flattening."""

from __future__ import annotations

import pytest

from valerie import AllCheck, AndCheck, InvalidArgumentError, OrCheck


class TestEvaluation:
    def test_and_stops_at_first_failure(self, clean_check, dirty_check):
        a, b, c = clean_check(), dirty_check("b"), dirty_check("c")
        assert AndCheck([a, b, c])(1) == b.result
        assert (a.call_count, b.call_count, c.call_count) == (1, 1, 0)

    def test_or_stops_at_first_success(self, clean_check, dirty_check):
        a, b, c = dirty_check("a"), clean_check(), dirty_check("c")
        assert OrCheck([a, b, c])(1).is_clean()
        assert c.call_count == 0

    def test_or_returns_last_result_when_nothing_passes(self, dirty_check):
        a, b = dirty_check("a"), dirty_check("b")
        assert OrCheck([a, b])(1) == b.result

    def test_all_merges_in_member_order(self, dirty_check, clean_check):
        a, b, c = dirty_check("a"), clean_check(), dirty_check("c")
        assert AllCheck([a, b, c])(1).keys() == ["a", "c"]

    @pytest.mark.parametrize("cls", [AndCheck, OrCheck, AllCheck])
    def test_empty_composition_is_clean(self, cls):
        assert cls([])(1).is_clean()


class TestConstruction:
    def test_members_may_not_be_none(self, clean_check):
        with pytest.raises(InvalidArgumentError):
            AndCheck(None)  # type: ignore[arg-type]
        with pytest.raises(InvalidArgumentError):
            AndCheck([clean_check(), None])  # type: ignore[list-item]

    def test_single_check_is_not_a_member_sequence(self, clean_check):
        with pytest.raises(InvalidArgumentError):
            AllCheck(clean_check())  # type: ignore[arg-type]

    def test_members_are_copied(self, clean_check):
        members = [clean_check()]
        check = AllCheck(members)
        members.append(clean_check())
        assert len(check.members) == 1


class TestFlattening:
    def test_same_variant_operands_are_spliced(self, clean_check):
        c1, c2, c3, c4 = (clean_check(str(i)) for i in range(4))
        merged = AllCheck.merge(AllCheck([c1, c2]), AllCheck([c3, c4, c1]))
        assert merged.members == (c1, c2, c3, c4, c1)

    def test_operator_chains_flatten(self, clean_check):
        a, b, c = clean_check(), clean_check(), clean_check()
        assert (a & b & c).members == (a, b, c)
        assert (a + (b + c)).members == (a, b, c)

    def test_other_variants_stay_opaque(self, clean_check):
        a, b, c = clean_check(), clean_check(), clean_check()
        inner = b | c
        merged = AndCheck.merge(a, inner)
        assert merged.members == (a, inner)

    def test_flattening_preserves_results(self, dirty_check, clean_check):
        a, b, c = dirty_check("a"), clean_check(), dirty_check("c")
        nested = AllCheck([a, AllCheck([b, c])])
        flat = AllCheck.merge(a, AllCheck([b, c]))
        assert nested(1) == flat(1)
        assert nested(1).keys() == flat(1).keys()
