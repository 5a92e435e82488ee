"""Steps layered on top of the primitives."""

from typing import Any, Callable, Iterable, List, Tuple

from loguru import logger

from .scope import Scope
from .step import State, Step


def fmap(f: Callable[[Any], Any], step: Step) -> Step:
    """Apply ``f`` to the return of ``step``."""

    def transition(state: State, scope: Scope) -> Tuple[Any, State]:
        result, state = step.transition(state, scope)
        return f(result), state

    return Step(transition, label="fmap")


def when(condition: Any, step: Step) -> Step:
    """Run ``step`` only if ``condition`` is truthy."""

    def transition(state: State, scope: Scope) -> Tuple[Any, State]:
        if condition:
            return step.transition(state, scope)
        return None, state

    return Step(transition, label="when")


def for_each(items: Iterable[Any], fn: Callable[[Any], Step]) -> Step:
    """Run ``fn(item)`` for every item in order and return the list of returns."""
    items = list(items)

    def transition(state: State, scope: Scope) -> Tuple[List[Any], State]:
        results = []
        for item in items:
            result, state = fn(item).transition(state, scope)
            scope.session.commit(state)
            results.append(result)
        return results, state

    return Step(transition, label="for_each")


def ignore_error(step: Step) -> Step:
    """Run ``step``, returning any raised exception instead of aborting.

    When ``step`` raises, the state goes back to what it was before ``step``.
    """

    def transition(state: State, scope: Scope) -> Tuple[Any, State]:
        try:
            return step.transition(state, scope)
        except Exception as e:
            logger.debug(f"Ignoring error in {scope.breadcrumb or '<top level>'}: {e!r}")
            scope.session.commit(state)
            scope.session.clear_failure()
            return e, state

    return Step(transition, label="ignore_error")


def current_description() -> Step:
    """Return the breadcrumb of the enclosing flows."""
    return Step(lambda state, scope: (scope.breadcrumb, state), label="current_description")
