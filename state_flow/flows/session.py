"""Run session: per-run bookkeeping owned by the runner."""

from typing import Any, List, Optional

from loguru import logger

from ..models.records import (
    AssertionRecord,
    FailureReport,
    RunStatus,
    StateTransition,
)
from ..reporting import LoggingReporter, Reporter


class RunSession:
    """Tracks the lifecycle, assertions and last committed state of one run.

    A session belongs to exactly one run. Steps never hold on to it; they
    reach it through the scope handed to their transition.
    """

    def __init__(
        self,
        reporter: Optional[Reporter] = None,
        breadcrumb_separator: str = " -> ",
    ) -> None:
        self.reporter = reporter or LoggingReporter()
        self.breadcrumb_separator = breadcrumb_separator
        self.status = RunStatus.PENDING
        self.history: List[StateTransition] = []
        self.assertions: List[AssertionRecord] = []
        self.committed_state: Any = None
        self.failure_breadcrumb: Optional[str] = None

    def transition(self, new_status: RunStatus, trigger: str, **metadata: Any) -> None:
        """Move to ``new_status`` and record the transition."""
        record = StateTransition(
            from_status=self.status,
            to_status=new_status,
            trigger=trigger,
            metadata=metadata,
        )
        self.history.append(record)
        logger.debug(f"Run transition: {self.status.value} -> {new_status.value} ({trigger})")
        self.status = new_status

    def commit(self, state: Any) -> None:
        """Remember ``state`` as the last state produced by a completed step."""
        self.committed_state = state

    def record_assertion(self, record: AssertionRecord) -> None:
        self.assertions.append(record)
        self.reporter.report_assertion(record)

    def mark_failure(self, breadcrumb: str) -> None:
        """Remember where a failure was first seen; outer flows keep the innermost."""
        if self.failure_breadcrumb is None:
            self.failure_breadcrumb = breadcrumb

    def clear_failure(self) -> None:
        self.failure_breadcrumb = None

    def report_failure(self, failure: BaseException) -> FailureReport:
        report = FailureReport(
            breadcrumb=self.failure_breadcrumb or "",
            failure=failure,
            state=self.committed_state,
        )
        self.reporter.report_failure(report)
        return report

    @property
    def mismatches(self) -> List[AssertionRecord]:
        return [record for record in self.assertions if not record.passed]

    @property
    def last_mismatch(self) -> Optional[AssertionRecord]:
        mismatches = self.mismatches
        return mismatches[-1] if mismatches else None
