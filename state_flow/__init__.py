"""state-flow - compose integration-test steps into state-threading flows."""

__version__ = "0.1.0"

from .errors import (
    AssertionMismatchError,
    FlowAborted,
    FlowDefinitionError,
    StateFlowError,
    UnboundSymbolError,
)
from .flows import (
    FlowRunner,
    RunOptions,
    RunResult,
    Step,
    bind,
    current_description,
    flow,
    fmap,
    for_each,
    get_state,
    gets,
    ignore_error,
    invoke,
    let,
    match,
    modify,
    put,
    return_value,
    run,
    run_strict,
    when,
    wrap_fn,
)

__all__ = [
    "Step",
    "return_value",
    "get_state",
    "gets",
    "put",
    "modify",
    "wrap_fn",
    "invoke",
    "flow",
    "bind",
    "let",
    "match",
    "fmap",
    "when",
    "for_each",
    "ignore_error",
    "current_description",
    "FlowRunner",
    "RunOptions",
    "RunResult",
    "run",
    "run_strict",
    "StateFlowError",
    "FlowDefinitionError",
    "UnboundSymbolError",
    "AssertionMismatchError",
    "FlowAborted",
]
