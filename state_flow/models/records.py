"""Run lifecycle, assertion and diff records."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RunStatus(str, Enum):
    """Lifecycle of a single run."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"


class StateTransition(BaseModel):
    """Run lifecycle transition record."""

    from_status: RunStatus
    to_status: RunStatus
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    trigger: str = Field(..., description="What triggered the transition")
    metadata: Dict[str, Any] = Field(default_factory=dict)


class Mismatch(BaseModel):
    """Node of a structured diff produced by a matcher."""

    path: List[Any] = Field(default_factory=list)
    expected: Any = None
    actual: Any = None
    reason: str
    children: List["Mismatch"] = Field(default_factory=list)

    def render(self, indent: int = 0) -> str:
        """Render the diff tree as indented text, one node per line."""
        location = "".join(f"[{p!r}]" for p in self.path) or "<root>"
        lines = [
            f"{'  ' * indent}{location}: {self.reason} "
            f"(expected {self.expected!r}, actual {self.actual!r})"
        ]
        for child in self.children:
            lines.append(child.render(indent + 1))
        return "\n".join(lines)


Mismatch.model_rebuild()


class MatchResult(BaseModel):
    """Outcome of comparing an expected pattern with an actual value."""

    passed: bool
    diff: Optional[Mismatch] = None


class AssertionRecord(BaseModel):
    """Report of one evaluated assertion. Never part of the threaded state."""

    breadcrumb: str = ""
    description: Optional[str] = None
    expected: Any = None
    actual: Any = None
    passed: bool
    diff: Optional[Mismatch] = None

    def summary(self) -> str:
        """One-paragraph human readable account of the assertion."""
        title = self.description or "match"
        where = self.breadcrumb or "<top level>"
        if self.passed:
            return f"{where}: {title} passed"
        text = f"{where}: {title} failed: expected {self.expected!r}, actual {self.actual!r}"
        if self.diff is not None:
            text += "\n" + self.diff.render(indent=1)
        return text


class FailureReport(BaseModel):
    """Report of a raised failure that aborted a run."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    breadcrumb: str = ""
    failure: BaseException
    state: Any = None
