"""Reporting sinks for assertion results and aborting failures."""

from abc import ABC, abstractmethod
from typing import List

from loguru import logger

from .errors import AssertionMismatchError
from .models.records import AssertionRecord, FailureReport


class Reporter(ABC):
    """Receives assertion records and failure reports from a run."""

    @abstractmethod
    def report_assertion(self, record: AssertionRecord) -> None:
        """Handle one evaluated assertion, passed or not."""
        pass

    @abstractmethod
    def report_failure(self, report: FailureReport) -> None:
        """Handle a raised failure that aborted the run."""
        pass


class LoggingReporter(Reporter):
    """Logs mismatches as warnings and aborts as errors."""

    def __init__(self, log_passes: bool = False):
        self.log_passes = log_passes

    def report_assertion(self, record: AssertionRecord) -> None:
        if not record.passed:
            logger.warning(f"Assertion failed: {record.summary()}")
        elif self.log_passes:
            logger.info(record.summary())

    def report_failure(self, report: FailureReport) -> None:
        logger.error(
            f"Flow aborted at '{report.breadcrumb or '<top level>'}': {report.failure!r}"
        )


class CollectingReporter(LoggingReporter):
    """Keeps every mismatch and failure for later inspection."""

    def __init__(self, log_passes: bool = False):
        super().__init__(log_passes=log_passes)
        self.mismatches: List[AssertionRecord] = []
        self.failures: List[FailureReport] = []

    def report_assertion(self, record: AssertionRecord) -> None:
        super().report_assertion(record)
        if not record.passed:
            self.mismatches.append(record)

    def report_failure(self, report: FailureReport) -> None:
        super().report_failure(report)
        self.failures.append(report)


class FailFastReporter(CollectingReporter):
    """Promotes the first mismatch to a raised :class:`AssertionMismatchError`."""

    def report_assertion(self, record: AssertionRecord) -> None:
        super().report_assertion(record)
        if not record.passed:
            raise AssertionMismatchError(record)
