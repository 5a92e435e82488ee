"""Runners: drive a step from an initial state under a failure policy."""

from typing import Any, Callable, Mapping, NamedTuple, Optional, Tuple, Union

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from ..config import FlowSettings, get_settings
from ..errors import FlowDefinitionError
from ..models.records import RunStatus
from ..reporting import FailFastReporter, LoggingReporter, Reporter
from .scope import Scope
from .session import RunSession
from .step import State, Step

StepInvoker = Callable[[Step, State, Scope], Tuple[Any, State]]

_UNSET: Any = object()


def invoke_step(step: Step, state: State, scope: Scope) -> Tuple[Any, State]:
    """Default step invoker: call the step's transition directly."""
    return step.transition(state, scope)


class RunResult(NamedTuple):
    """Return value (or captured failure) and final state of a run."""

    value: Any
    state: Any


class RunOptions(BaseModel):
    """Explicit configuration for one run."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    init: Callable[[], Any] = Field(default=dict, description="Produces the initial state")
    runner: Callable[..., Tuple[Any, Any]] = Field(
        default=invoke_step, description="Invokes the top-level step"
    )
    reporter: Optional[Reporter] = None
    fail_fast: bool = Field(default=False, description="Raise on the first reported mismatch")
    before_flow: Optional[Callable[[Any], Any]] = None
    cleanup: Optional[Callable[[Any], Any]] = None
    breadcrumb_separator: str = " -> "
    log_passes: bool = False

    @classmethod
    def from_settings(cls, settings: Optional[FlowSettings] = None, **overrides: Any) -> "RunOptions":
        """Build options from settings, letting ``overrides`` win."""
        settings = settings or get_settings()
        values = {
            "fail_fast": settings.fail_fast,
            "breadcrumb_separator": settings.breadcrumb_separator,
            "log_passes": settings.log_passes,
        }
        values.update(overrides)
        return cls(**values)

    @classmethod
    def coerce(cls, options: Union["RunOptions", Mapping[str, Any], None]) -> "RunOptions":
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        return cls.model_validate(dict(options))

    def build_reporter(self) -> Reporter:
        if self.reporter is not None:
            return self.reporter
        if self.fail_fast:
            return FailFastReporter(log_passes=self.log_passes)
        return LoggingReporter(log_passes=self.log_passes)


class FlowRunner:
    """Drives steps through the run lifecycle.

    Features:
    - Lifecycle tracking (pending → running → completed/aborted)
    - Soft runs that capture a raised failure as the return value
    - Strict runs that let a raised failure propagate to the caller
    - Before/cleanup hooks around every run
    """

    def __init__(self, options: Union[RunOptions, Mapping[str, Any], None] = None) -> None:
        self.options = RunOptions.coerce(options)
        self.last_session: Optional[RunSession] = None

    def _new_session(self) -> RunSession:
        session = RunSession(
            reporter=self.options.build_reporter(),
            breadcrumb_separator=self.options.breadcrumb_separator,
        )
        self.last_session = session
        return session

    def _execute(self, step: Step, state: State, session: RunSession) -> RunResult:
        if not isinstance(step, Step):
            raise FlowDefinitionError(f"Can only run steps, got {type(step).__name__}: {step!r}")

        session.commit(state)
        if self.options.before_flow is not None:
            state = self.options.before_flow(state)
            session.commit(state)

        session.transition(RunStatus.RUNNING, "run started", step=step.label)
        try:
            value, state = self.options.runner(step, state, Scope.root(session))
        except Exception as e:
            session.transition(
                RunStatus.ABORTED,
                "failure raised",
                error=repr(e),
                breadcrumb=session.failure_breadcrumb,
            )
            session.report_failure(e)
            raise

        session.commit(state)
        session.transition(
            RunStatus.COMPLETED, "step returned", mismatches=len(session.mismatches)
        )
        logger.info(
            f"Run completed: {step.label or '<anonymous>'} "
            f"({len(session.assertions)} assertions, {len(session.mismatches)} mismatches)"
        )
        return RunResult(value, state)

    def _cleanup(self, session: RunSession) -> None:
        if self.options.cleanup is not None:
            self.options.cleanup(session.committed_state)

    def run(self, step: Step, initial_state: Any = _UNSET) -> RunResult:
        """Run ``step``, capturing any raised failure as the return value.

        On failure the state returned is the one left by the last step that
        completed. Nothing derived from ``Exception`` escapes.
        """
        session = self._new_session()
        try:
            state = self.options.init() if initial_state is _UNSET else initial_state
            result = self._execute(step, state, session)
        except Exception as e:
            result = RunResult(e, session.committed_state)

        try:
            self._cleanup(session)
        except Exception as e:
            logger.error(f"Cleanup failed: {e!r}")
            if not isinstance(result.value, Exception):
                result = RunResult(e, result.state)
        return result

    def run_strict(self, step: Step) -> Any:
        """Run ``step`` from ``options.init()``; raised failures propagate unchanged."""
        session = self._new_session()
        try:
            value = self._execute(step, self.options.init(), session).value
        except Exception:
            try:
                self._cleanup(session)
            except Exception as e:
                logger.error(f"Cleanup failed: {e!r}")
            raise

        self._cleanup(session)
        return value


def run(
    step: Step,
    initial_state: Any = _UNSET,
    options: Union[RunOptions, Mapping[str, Any], None] = None,
) -> RunResult:
    """Soft run: returns ``(value_or_failure, state)`` and never raises."""
    return FlowRunner(options).run(step, initial_state)


def run_strict(step: Step, options: Union[RunOptions, Mapping[str, Any], None] = None) -> Any:
    """Hard run: returns the step's return value, raising any failure."""
    return FlowRunner(options).run_strict(step)
