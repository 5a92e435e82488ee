"""Tests for the primitive step constructors."""

from dataclasses import FrozenInstanceError

import pytest

from state_flow import get_state, gets, modify, put, return_value, run, wrap_fn
from state_flow.flows import Step

from conftest import inc_count, read_count


@pytest.mark.unit
class TestPrimitives:
    """Each primitive's (return, state) contract."""

    def test_return_value(self, counter_state):
        assert run(return_value(42), counter_state) == (42, {"count": 0})

    def test_get_state(self, counter_state):
        assert run(get_state(), counter_state) == (counter_state, counter_state)

    def test_gets(self, counter_state):
        assert run(gets(inc_count), counter_state) == ({"count": 1}, {"count": 0})

    def test_gets_passes_extra_arguments(self):
        step = gets(lambda state, key, default: state.get(key, default), "missing", "fallback")
        assert run(step, {}) == ("fallback", {})

    def test_put(self, counter_state):
        assert run(put({"count": 9}), counter_state) == ({"count": 0}, {"count": 9})

    def test_modify(self, counter_state):
        assert run(modify(inc_count), counter_state) == ({"count": 0}, {"count": 1})

    def test_modify_passes_extra_arguments(self):
        step = modify(lambda state, n: {**state, "count": state["count"] + n}, 5)
        assert run(step, {"count": 1}) == ({"count": 1}, {"count": 6})

    def test_wrap_fn_returns_call_result(self, counter_state):
        assert run(wrap_fn(lambda: "called"), counter_state) == ("called", counter_state)

    def test_wrap_fn_propagates_errors_from_transition(self):
        def boom():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            wrap_fn(boom).invoke({})


@pytest.mark.unit
class TestStepValue:
    """Steps are inert values until invoked."""

    def test_construction_has_no_side_effect(self):
        calls = []
        step = wrap_fn(lambda: calls.append("ran"))

        assert calls == []
        step.invoke({})
        assert calls == ["ran"]

    def test_step_is_immutable(self):
        step = return_value(1)
        with pytest.raises(FrozenInstanceError):
            step.label = "changed"

    def test_invoke_without_runner(self, counter_state):
        assert gets(read_count).invoke(counter_state) == (0, counter_state)

    def test_step_can_be_reused_across_runs(self):
        step = modify(inc_count)
        assert run(step, {"count": 1}).state == {"count": 2}
        assert run(step, {"count": 10}).state == {"count": 11}

    def test_custom_step(self):
        step = Step(lambda state, scope: (len(state), state + [1]), label="append")
        assert run(step, [1, 2]) == (2, [1, 2, 1])
