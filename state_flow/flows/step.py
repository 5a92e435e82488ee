"""Step value and the primitive step constructors."""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from loguru import logger

from .scope import Scope

State = Any
Transition = Callable[[State, Scope], Tuple[Any, State]]


@dataclass(frozen=True)
class Step:
    """Immutable description of a state transition.

    ``transition`` maps ``(state, scope)`` to ``(return_value, new_state)``.
    Building a Step has no side effect; only invoking the transition does.
    """

    transition: Transition
    label: Optional[str] = None

    def invoke(self, state: State, scope: Optional[Scope] = None) -> Tuple[Any, State]:
        """Run the step stand-alone, outside of any runner."""
        return self.transition(state, scope if scope is not None else Scope.root())

    def __repr__(self) -> str:
        return f"Step({self.label or '<anonymous>'})"


def return_value(value: Any) -> Step:
    """Return ``value`` and leave the state untouched."""
    return Step(lambda state, scope: (value, state), label="return")


def get_state() -> Step:
    """Return the current state."""
    return Step(lambda state, scope: (state, state), label="get_state")


def gets(f: Callable[..., Any], *args: Any) -> Step:
    """Return ``f(state, *args)`` and leave the state untouched."""
    return Step(lambda state, scope: (f(state, *args), state), label="gets")


def put(value: State) -> Step:
    """Replace the state with ``value``, returning the old state."""
    return Step(lambda state, scope: (state, value), label="put")


def modify(f: Callable[..., State], *args: Any) -> Step:
    """Replace the state with ``f(state, *args)``, returning the old state."""
    return Step(lambda state, scope: (state, f(state, *args)), label="modify")


def wrap_fn(f: Callable[[], Any]) -> Step:
    """Lift a zero-argument call into a step.

    Whatever ``f`` raises propagates out of the transition untouched.
    """

    name = getattr(f, "__name__", repr(f))

    def transition(state: State, scope: Scope) -> Tuple[Any, State]:
        logger.debug(f"Invoking {name}")
        return f(), state

    return Step(transition, label=f"wrap_fn:{name}")


invoke = wrap_fn
