"""Step composition and execution engine."""

from .assertions import match
from .combinators import current_description, fmap, for_each, ignore_error, when
from .composer import Binding, Flow, LetBinding, PlainStep, bind, flow, let
from .runner import FlowRunner, RunOptions, RunResult, invoke_step, run, run_strict
from .scope import Bindings, Scope
from .session import RunSession
from .step import Step, get_state, gets, invoke, modify, put, return_value, wrap_fn

__all__ = [
    "Step",
    "return_value",
    "get_state",
    "gets",
    "put",
    "modify",
    "wrap_fn",
    "invoke",
    "Flow",
    "PlainStep",
    "Binding",
    "LetBinding",
    "flow",
    "bind",
    "let",
    "match",
    "fmap",
    "when",
    "for_each",
    "ignore_error",
    "current_description",
    "Bindings",
    "Scope",
    "RunSession",
    "FlowRunner",
    "RunOptions",
    "RunResult",
    "invoke_step",
    "run",
    "run_strict",
]
