# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""evaluate(), evaluate_async() and format_result_map()."""

from __future__ import annotations

import logging
import time

import pytest

from valerie import (
    Check,
    EvaluationTimeoutError,
    InvalidArgumentError,
    Result,
    ResultMap,
    evaluate,
    evaluate_async,
    format_result_map,
)


@pytest.fixture()
def recorded(monkeypatch):
    calls = []

    def _record(name, outcome, started_at, result_count=None):
        calls.append((name, outcome, result_count))

    monkeypatch.setattr("valerie.runtime.evaluation.record_evaluation_metrics", _record)
    return calls


def raising_check():
    def boom(value, context):
        raise InvalidArgumentError("bad tree", argument="value")

    return Check.from_function(boom)


def slow_check(seconds):
    def slow(value, context):
        time.sleep(seconds)
        return ResultMap.CLEAN

    return Check.from_function(slow)


class TestEvaluate:
    def test_clean_outcome(self, checkers, recorded):
        assert evaluate(checkers.is_not_null(key="k"), 1, name="order").is_clean()
        assert recorded == [("order", "clean", 0)]

    def test_dirty_outcome_counts_results(self, checkers, recorded):
        check = checkers.is_not_null(key="k") + checkers.is_instance_of(str, key="k") + checkers.fail()
        result = evaluate(check, None, name="order")
        assert result.keys() == ["k", "fail"]
        assert recorded == [("order", "dirty", 3)]

    def test_name_defaults_to_check_type(self, checkers, recorded):
        evaluate(checkers.pass_(), 1)
        assert recorded[0][0] == "FunctionCheck"

    def test_each_call_gets_a_fresh_context(self, recorded):
        def stash_once(value, context):
            if context.has_stashed("seen"):
                return ResultMap.from_entry("k", [Result("context reused", "C")])
            context.set_stashed("seen", True)
            return ResultMap.CLEAN

        check = Check.from_function(stash_once)
        assert evaluate(check, 1).is_clean()
        assert evaluate(check, 1).is_clean()

    def test_errors_are_logged_counted_and_reraised(self, recorded, caplog):
        with caplog.at_level(logging.ERROR, logger="valerie.runtime.evaluation"):
            with pytest.raises(InvalidArgumentError, match="bad tree"):
                evaluate(raising_check(), 1, name="broken")
        assert recorded == [("broken", "error", None)]
        assert any("broken" in record.getMessage() for record in caplog.records)

    def test_requires_a_check(self):
        with pytest.raises(InvalidArgumentError):
            evaluate(None, 1)  # type: ignore[arg-type]


class TestEvaluateAsync:
    @pytest.mark.asyncio
    async def test_returns_result(self, checkers):
        result = await evaluate_async(checkers.is_not_null(key="k"), None, timeout=5)
        assert result.keys() == ["k"]

    @pytest.mark.asyncio
    async def test_without_timeout(self, checkers):
        assert (await evaluate_async(checkers.pass_(), 1)).is_clean()

    @pytest.mark.asyncio
    async def test_timeout_raises(self):
        with pytest.raises(EvaluationTimeoutError) as excinfo:
            await evaluate_async(slow_check(0.5), 1, timeout=0.05, name="slow")
        assert excinfo.value.name == "slow"
        assert isinstance(excinfo.value, TimeoutError)
        assert "0.05s" in str(excinfo.value)

    @pytest.mark.asyncio
    async def test_errors_propagate(self):
        with pytest.raises(InvalidArgumentError):
            await evaluate_async(raising_check(), 1, timeout=5)


class TestFormatResultMap:
    def test_clean(self):
        assert format_result_map(ResultMap.CLEAN, "order") == "Validation of order passed."

    def test_lists_every_result(self):
        result = ResultMap.from_mapping({
            "id": [Result("required field cannot be null", Result.REQUIRED_FIELD)],
            "name": [Result("is too long", Result.TOO_LONG), Result("bad", "X")],
        })
        assert format_result_map(result, "order").splitlines() == [
            "Validation failed for order:",
            " - id: required field cannot be null (REQUIRED_FIELD)",
            " - name: is too long (TOO_LONG)",
            " - name: bad (X)",
        ]
