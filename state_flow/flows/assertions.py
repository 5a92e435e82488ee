"""Assertion step bridging flows to the matchers."""

from typing import Any, Optional, Tuple

from ..matchers import compare
from ..models.records import AssertionRecord
from .scope import Scope
from .step import State, Step


def match(expected: Any, actual: Any, description: Optional[str] = None) -> Step:
    """Assert that ``actual`` matches ``expected``.

    ``actual`` may be a literal value or a step producing one; a step is run
    against the current state like any other entry. The assertion returns the
    actual value and never interrupts the flow: a mismatch is handed to the
    run's reporter, which decides what, if anything, to do about it.
    """

    def transition(state: State, scope: Scope) -> Tuple[Any, State]:
        if isinstance(actual, Step):
            value, state = actual.transition(state, scope)
        else:
            value = actual

        result = compare(expected, value)
        scope.session.record_assertion(
            AssertionRecord(
                breadcrumb=scope.breadcrumb,
                description=description,
                expected=expected,
                actual=value,
                passed=result.passed,
                diff=result.diff,
            )
        )
        return value, state

    return Step(transition, label=f"match:{description}" if description else "match")
