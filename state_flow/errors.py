"""Exception hierarchy for flow construction and execution."""

from typing import Any, Optional


class StateFlowError(Exception):
    """Base class for errors raised by state-flow itself."""


class FlowDefinitionError(StateFlowError, TypeError):
    """A flow or entry was built from something that is not a valid entry."""


class UnboundSymbolError(StateFlowError, KeyError):
    """A binding name was looked up before any entry bound it."""

    def __init__(self, name: str, available: Any = ()):
        self.name = name
        self.available = sorted(available)
        super().__init__(name)

    def __str__(self) -> str:
        return f"Unbound name '{self.name}' (bound: {', '.join(self.available) or 'nothing'})"


class AssertionMismatchError(StateFlowError, AssertionError):
    """A reported mismatch promoted to a raised failure by a reporter policy."""

    def __init__(self, record: Any):
        self.record = record
        super().__init__(record.summary())


class FlowAborted(StateFlowError):
    """A registered flow test stopped on a raised failure."""

    def __init__(
        self,
        breadcrumb: Optional[str],
        failure: BaseException,
        last_mismatch: Optional[Any] = None,
    ):
        self.breadcrumb = breadcrumb
        self.failure = failure
        self.last_mismatch = last_mismatch
        message = f"Flow aborted at '{breadcrumb or '<top level>'}': {failure!r}"
        if last_mismatch is not None:
            message += f"\nLast reported mismatch: {last_mismatch.summary()}"
        super().__init__(message)
