"""pytest integration: declare flows as test functions."""

import re
from typing import Any, Callable, Mapping, Union

import pytest

from .errors import AssertionMismatchError, FlowAborted
from .flows import FlowRunner, RunOptions, flow


def _test_name(name: str) -> str:
    slug = re.sub(r"\W+", "_", name).strip("_").lower() or "flow"
    return slug if slug.startswith("test") else f"test_{slug}"


def _resolve_options(options: Union[RunOptions, Mapping[str, Any], None]) -> RunOptions:
    if isinstance(options, RunOptions):
        return options
    return RunOptions.from_settings(**dict(options or {}))


def defflow(
    name: str,
    options: Union[RunOptions, Mapping[str, Any], None] = None,
    *entries: Any,
) -> Callable[[], None]:
    """Build a pytest test function that runs a flow strictly.

    Bind the result to a module-level name starting with ``test`` so pytest
    collects it::

        test_signup = defflow("signup", {"init": make_system}, create_user, check_user)

    A raised failure errors the test with :class:`FlowAborted`, chained from the
    original exception. Reported mismatches fail it once the flow has finished.
    """
    step = flow(name, *entries)
    run_options = _resolve_options(options)

    def test_procedure() -> None:
        runner = FlowRunner(run_options)
        try:
            runner.run_strict(step)
        except AssertionMismatchError:
            raise
        except Exception as e:
            session = runner.last_session
            raise FlowAborted(session.failure_breadcrumb, e, session.last_mismatch) from e

        mismatches = runner.last_session.mismatches
        if mismatches:
            pytest.fail(
                f"{len(mismatches)} assertion(s) failed in flow '{name}':\n"
                + "\n".join(record.summary() for record in mismatches),
                pytrace=False,
            )

    test_procedure.__name__ = test_procedure.__qualname__ = _test_name(name)
    test_procedure.__doc__ = f"Run flow '{name}'."
    test_procedure.flow = step
    return test_procedure
