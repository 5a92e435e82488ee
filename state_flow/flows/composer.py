"""Flow composition: sequencing entries into a single step."""

from dataclasses import dataclass
from typing import Any, Callable, Tuple, Union

from loguru import logger

from ..errors import FlowDefinitionError
from .scope import Bindings, Scope
from .step import State, Step

# A Step, or a callable receiving the current bindings and returning a Step.
Target = Union[Step, Callable[[Bindings], Step]]


@dataclass(frozen=True)
class PlainStep:
    """Run a step; its return becomes the flow's latest return."""

    target: Target


@dataclass(frozen=True)
class Binding:
    """Run a step and bind its return to ``name`` for the entries after it."""

    name: str
    target: Target


@dataclass(frozen=True)
class LetBinding:
    """Bind ``name`` to an expression evaluated against the bindings only."""

    name: str
    expression: Any


@dataclass(frozen=True)
class LetBlock:
    bindings: Tuple[LetBinding, ...]


Entry = Union[PlainStep, Binding, LetBinding]


@dataclass(frozen=True)
class Flow(Step):
    """A labeled step composed of ordered entries."""

    entries: Tuple[Entry, ...] = ()

    def __repr__(self) -> str:
        return f"Flow({self.label!r}, {len(self.entries)} entries)"


def _check_name(name: Any) -> str:
    if not isinstance(name, str) or not name:
        raise FlowDefinitionError(f"Binding names must be non-empty strings, got {name!r}")
    return name


def _check_target(target: Any) -> Target:
    if isinstance(target, Step) or callable(target):
        return target
    raise FlowDefinitionError(
        f"Expected a Step or a callable producing one, got {type(target).__name__}: {target!r}"
    )


def bind(name: str, target: Target) -> Binding:
    """Bind the return of ``target`` to ``name``."""
    return Binding(_check_name(name), _check_target(target))


def let(*pairs: Any, **named: Any) -> LetBlock:
    """Bind names to expressions, in order.

    Accepts alternating ``name, expression`` positional pairs and/or keyword
    arguments. Callable expressions receive the bindings made so far (including
    earlier names of the same block); anything else is bound as-is.
    """
    if len(pairs) % 2:
        raise FlowDefinitionError("let expects an even number of name/expression arguments")
    items = list(zip(pairs[::2], pairs[1::2])) + list(named.items())
    if not items:
        raise FlowDefinitionError("let requires at least one binding")
    return LetBlock(tuple(LetBinding(_check_name(name), expr) for name, expr in items))


def parse_entry(entry: Any) -> Tuple[Entry, ...]:
    """Normalize one argument of :func:`flow` into tagged entries."""
    if isinstance(entry, (PlainStep, Binding, LetBinding)):
        return (entry,)
    if isinstance(entry, LetBlock):
        return entry.bindings
    if isinstance(entry, Step):
        return (PlainStep(entry),)
    if isinstance(entry, (tuple, list)):
        if len(entry) == 2 and isinstance(entry[0], str):
            return (bind(entry[0], entry[1]),)
        raise FlowDefinitionError(f"Binding entries must be (name, step) pairs, got {entry!r}")
    if callable(entry):
        return (PlainStep(entry),)
    raise FlowDefinitionError(
        f"Flow entries must be steps, bindings or let blocks, got {type(entry).__name__}: {entry!r}"
    )


def _resolve(target: Target, scope: Scope) -> Step:
    if isinstance(target, Step):
        return target
    step = target(scope.bindings)
    if not isinstance(step, Step):
        raise FlowDefinitionError(
            f"Deferred entry {getattr(target, '__name__', target)!r} returned "
            f"{type(step).__name__}, expected a Step"
        )
    return step


def _evaluate(expression: Any, scope: Scope) -> Any:
    return expression(scope.bindings) if callable(expression) else expression


def run_entries(entries: Tuple[Entry, ...], state: State, scope: Scope) -> Tuple[Any, State]:
    """Thread ``state`` through ``entries`` in order, extending ``scope`` as names are bound."""
    result = None
    for entry in entries:
        if isinstance(entry, LetBinding):
            result = _evaluate(entry.expression, scope)
            scope = scope.bind(entry.name, result)
            continue

        step = _resolve(entry.target, scope)
        result, state = step.transition(state, scope)
        scope.session.commit(state)
        if isinstance(entry, Binding):
            scope = scope.bind(entry.name, result)
    return result, state


def flow(label: str, *entries: Any) -> Flow:
    """Compose ``entries`` into one step labeled ``label``.

    Entries are steps, ``(name, step)`` pairs or :func:`bind` results,
    :func:`let` blocks, or callables that take the current bindings and return
    a step. The flow returns the return of its last entry and the state left
    by it.
    """
    if not isinstance(label, str):
        raise FlowDefinitionError(
            f"flow requires a string label as its first argument, got {label!r}"
        )
    parsed = tuple(item for entry in entries for item in parse_entry(entry))

    def transition(state: State, scope: Scope) -> Tuple[Any, State]:
        inner = scope.enter(label)
        logger.debug(f"Entering flow: {inner.breadcrumb}")
        try:
            return run_entries(parsed, state, inner)
        except Exception:
            inner.session.mark_failure(inner.breadcrumb)
            raise

    return Flow(transition, label=label, entries=parsed)
