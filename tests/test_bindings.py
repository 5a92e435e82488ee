"""Tests for named-value bindings inside flows."""

import pytest

from state_flow import (
    UnboundSymbolError,
    bind,
    flow,
    gets,
    let,
    modify,
    return_value,
    run,
    run_strict,
)

from conftest import inc_count, read_count


@pytest.mark.unit
class TestBindingVisibility:
    """Bound names are visible to later entries only."""

    def test_before_and_after(self, counter_state):
        step = flow(
            "b",
            ("count_before", gets(read_count)),
            modify(inc_count),
            ("count_after", gets(read_count)),
            lambda b: return_value({"before": b["count_before"], "after": b["count_after"]}),
        )

        assert run(step, counter_state) == ({"before": 0, "after": 1}, {"count": 1})

    def test_bind_helper_equivalent_to_pair(self, counter_state):
        step = flow(
            "b",
            bind("n", gets(read_count)),
            lambda b: return_value(b["n"] + 100),
        )

        assert run(step, counter_state).value == 100

    def test_binding_return_is_flow_return(self, counter_state):
        step = flow("b", ("n", gets(read_count)))

        assert run(step, counter_state).value == 0

    def test_nested_flow_sees_outer_bindings(self, counter_state):
        step = flow(
            "outer",
            ("x", return_value(10)),
            flow("inner", lambda b: return_value(b["x"] * 2)),
        )

        assert run(step, counter_state).value == 20

    def test_nested_flow_can_add_bindings_for_its_own_entries(self):
        step = flow(
            "outer",
            ("x", return_value(1)),
            flow(
                "inner",
                ("y", return_value(2)),
                flow("deeper", lambda b: return_value(b["x"] + b["y"])),
            ),
        )

        assert run(step, {}).value == 3

    def test_nested_bindings_do_not_leak_to_parent(self):
        step = flow(
            "outer",
            flow("inner", ("secret", return_value(1))),
            lambda b: return_value(b["secret"]),
        )

        value, state = run(step, {})

        assert isinstance(value, UnboundSymbolError)
        assert value.name == "secret"

    def test_sibling_flows_do_not_share_bindings(self):
        first = flow("first", ("x", return_value(1)))
        second = flow("second", lambda b: return_value(b["x"]))

        with pytest.raises(UnboundSymbolError):
            run_strict(flow("parent", first, second))

    def test_rebinding_shadows_earlier_value(self):
        step = flow(
            "shadow",
            ("x", return_value(1)),
            ("x", return_value(2)),
            lambda b: return_value(b["x"]),
        )

        assert run(step, {}).value == 2

    def test_deferred_binding_target(self):
        step = flow(
            "chain",
            ("x", return_value(3)),
            ("y", lambda b: return_value(b["x"] + 1)),
            lambda b: return_value((b["x"], b["y"])),
        )

        assert run(step, {}).value == (3, 4)

    def test_binding_reads_state_at_its_position(self, counter_state):
        step = flow(
            "positions",
            modify(inc_count),
            ("seen", gets(read_count)),
            modify(inc_count),
            modify(inc_count),
            lambda b: return_value(b["seen"]),
        )

        assert run(step, counter_state) == (1, {"count": 3})


@pytest.mark.unit
class TestLet:
    """Let blocks bind expressions without touching the state."""

    def test_let_literals(self, counter_state):
        step = flow("let", let(a=1, b=2), lambda b: return_value(b["a"] + b["b"]))

        assert run(step, counter_state) == (3, counter_state)

    def test_let_positional_pairs(self):
        step = flow("let", let("a", 1, "b", lambda b: b["a"] + 1))

        assert run(step, {}).value == 2

    def test_later_let_sees_earlier_let(self):
        step = flow(
            "let",
            let(a=lambda b: 5, b=lambda b: b["a"] * 2, c=lambda b: b["b"] + b["a"]),
        )

        assert run(step, {}).value == 15

    def test_let_sees_step_bindings(self, counter_state):
        step = flow(
            "let",
            modify(inc_count),
            ("n", gets(read_count)),
            let(doubled=lambda b: b["n"] * 2),
        )

        assert run(step, counter_state) == (2, {"count": 1})

    def test_let_does_not_touch_state(self, counter_state):
        step = flow("let", modify(inc_count), let(x=99))

        assert run(step, counter_state) == (99, {"count": 1})

    def test_let_requires_pairs(self):
        with pytest.raises(TypeError):
            let("a")

    def test_let_requires_bindings(self):
        with pytest.raises(TypeError):
            let()

    def test_binding_names_must_be_strings(self):
        with pytest.raises(TypeError):
            let(1, 2)


@pytest.mark.unit
class TestUnboundNames:
    """Looking up a missing name is a raised failure."""

    def test_soft_run_captures_unbound_name(self, counter_state):
        value, state = run(flow("x", lambda b: return_value(b["nope"])), counter_state)

        assert isinstance(value, UnboundSymbolError)
        assert isinstance(value, KeyError)
        assert state == counter_state

    def test_error_lists_available_names(self):
        step = flow("x", ("known", return_value(1)), lambda b: return_value(b["unknown"]))

        with pytest.raises(UnboundSymbolError, match="known"):
            run_strict(step)
