"""Structural matchers used by assertion steps.

A matcher inspects an actual value and returns ``None`` when it matches, or a
:class:`~state_flow.models.Mismatch` diff tree describing where it does not.
Plain values are turned into matchers by :func:`as_matcher`, so expectations
can be written as ordinary literals::

    compare({"user": {"name": "ada"}}, {"user": {"name": "ada", "id": 7}})
"""

import re
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .models.records import MatchResult, Mismatch

Path = Tuple[Union[str, int], ...]


def _mismatch(
    path: Path,
    expected: Any,
    actual: Any,
    reason: str,
    children: Iterable[Mismatch] = (),
) -> Mismatch:
    return Mismatch(
        path=list(path),
        expected=expected,
        actual=actual,
        reason=reason,
        children=list(children),
    )


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


class Matcher(ABC):
    """Base class for all matchers."""

    @abstractmethod
    def match(self, actual: Any, path: Path = ()) -> Optional[Mismatch]:
        """Return ``None`` if ``actual`` matches, otherwise the mismatch."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.describe()})"

    def describe(self) -> str:
        return ""


class Equals(Matcher):
    """Exact equality. Mappings must have the same keys, sequences the same length.

    Nested values that are matchers are applied as such; all other nested values
    are compared exactly.
    """

    def __init__(self, value: Any):
        self.value = value

    def describe(self) -> str:
        return repr(self.value)

    @staticmethod
    def _nested(value: Any) -> Matcher:
        return value if isinstance(value, Matcher) else Equals(value)

    def match(self, actual: Any, path: Path = ()) -> Optional[Mismatch]:
        expected = self.value
        if isinstance(expected, Mapping) and isinstance(actual, Mapping):
            children = []
            for key, value in expected.items():
                if key not in actual:
                    children.append(_mismatch(path + (key,), value, None, "missing key"))
                    continue
                child = self._nested(value).match(actual[key], path + (key,))
                if child is not None:
                    children.append(child)
            for key in actual:
                if key not in expected:
                    children.append(_mismatch(path + (key,), None, actual[key], "unexpected key"))
            return _mismatch(path, expected, actual, "mapping differs", children) if children else None

        if _is_sequence(expected) and _is_sequence(actual):
            children = []
            for index, (item, other) in enumerate(zip(expected, actual)):
                child = self._nested(item).match(other, path + (index,))
                if child is not None:
                    children.append(child)
            if len(expected) != len(actual):
                children.append(_mismatch(path, len(expected), len(actual), "length differs"))
            return _mismatch(path, expected, actual, "sequence differs", children) if children else None

        if expected == actual:
            return None
        return _mismatch(path, expected, actual, "not equal")


class Predicate(Matcher):
    """Matches when ``fn(actual)`` is truthy."""

    def __init__(self, fn: Callable[[Any], Any], name: Optional[str] = None):
        self.fn = fn
        self.name = name or getattr(fn, "__name__", repr(fn))

    def describe(self) -> str:
        return self.name

    def match(self, actual: Any, path: Path = ()) -> Optional[Mismatch]:
        try:
            ok = self.fn(actual)
        except Exception as e:
            return _mismatch(path, self.name, actual, f"predicate raised {e!r}")
        if ok:
            return None
        return _mismatch(path, self.name, actual, "predicate not satisfied")


class Embeds(Matcher):
    """Matches a mapping containing at least the expected keys.

    Extra keys in the actual mapping are ignored; expected values go through
    :func:`as_matcher`, so nested mappings are matched by subset too.
    """

    def __init__(self, expected: Mapping[Any, Any]):
        self.expected = expected

    def describe(self) -> str:
        return repr(dict(self.expected))

    def match(self, actual: Any, path: Path = ()) -> Optional[Mismatch]:
        if not isinstance(actual, Mapping):
            return _mismatch(path, self.expected, actual, "expected a mapping")
        children = []
        for key, value in self.expected.items():
            if key not in actual:
                children.append(_mismatch(path + (key,), value, None, "missing key"))
                continue
            child = as_matcher(value).match(actual[key], path + (key,))
            if child is not None:
                children.append(child)
        if children:
            return _mismatch(path, self.expected, actual, "mapping does not embed expected", children)
        return None


class SequenceOf(Matcher):
    """Matches a sequence element by element, in order."""

    def __init__(self, items: Sequence[Any]):
        self.items = list(items)

    def describe(self) -> str:
        return repr(self.items)

    def match(self, actual: Any, path: Path = ()) -> Optional[Mismatch]:
        if not _is_sequence(actual):
            return _mismatch(path, self.items, actual, "expected a sequence")
        children = []
        for index, (item, other) in enumerate(zip(self.items, actual)):
            child = as_matcher(item).match(other, path + (index,))
            if child is not None:
                children.append(child)
        if len(self.items) != len(actual):
            children.append(_mismatch(path, len(self.items), len(actual), "length differs"))
        if children:
            return _mismatch(path, self.items, actual, "sequence differs", children)
        return None


class InAnyOrder(Matcher):
    """Matches a sequence whose elements match the expected ones in some order."""

    def __init__(self, items: Sequence[Any]):
        self.items = list(items)

    def describe(self) -> str:
        return repr(self.items)

    def _assign(self, matchers: List[Matcher], actual: Sequence[Any], used: List[bool]) -> bool:
        if not matchers:
            return True
        head, rest = matchers[0], matchers[1:]
        for index, other in enumerate(actual):
            if used[index] or head.match(other) is not None:
                continue
            used[index] = True
            if self._assign(rest, actual, used):
                return True
            used[index] = False
        return False

    def match(self, actual: Any, path: Path = ()) -> Optional[Mismatch]:
        if not _is_sequence(actual):
            return _mismatch(path, self.items, actual, "expected a sequence")
        if len(self.items) != len(actual):
            return _mismatch(path, self.items, actual, "length differs")
        matchers = [as_matcher(item) for item in self.items]
        if self._assign(matchers, actual, [False] * len(actual)):
            return None
        return _mismatch(path, self.items, actual, "no ordering of actual matches expected")


class Regex(Matcher):
    """Matches strings in which the pattern is found."""

    def __init__(self, pattern: Union[str, "re.Pattern[str]"]):
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern

    def describe(self) -> str:
        return repr(self.pattern.pattern)

    def match(self, actual: Any, path: Path = ()) -> Optional[Mismatch]:
        if isinstance(actual, str) and self.pattern.search(actual):
            return None
        return _mismatch(path, self.pattern.pattern, actual, "does not match pattern")


class AllOf(Matcher):
    """Matches when every inner matcher matches."""

    def __init__(self, *expected: Any):
        self.matchers = [as_matcher(item) for item in expected]

    def describe(self) -> str:
        return ", ".join(repr(m) for m in self.matchers)

    def match(self, actual: Any, path: Path = ()) -> Optional[Mismatch]:
        children = [m for m in (matcher.match(actual, path) for matcher in self.matchers) if m]
        if children:
            return _mismatch(path, self.matchers, actual, "not all matchers matched", children)
        return None


class AnyOf(Matcher):
    """Matches when at least one inner matcher matches."""

    def __init__(self, *expected: Any):
        self.matchers = [as_matcher(item) for item in expected]

    def describe(self) -> str:
        return ", ".join(repr(m) for m in self.matchers)

    def match(self, actual: Any, path: Path = ()) -> Optional[Mismatch]:
        children = []
        for matcher in self.matchers:
            mismatch = matcher.match(actual, path)
            if mismatch is None:
                return None
            children.append(mismatch)
        return _mismatch(path, self.matchers, actual, "no matcher matched", children)


def as_matcher(expected: Any) -> Matcher:
    """Turn a plain expected value into the matcher it stands for."""
    if isinstance(expected, Matcher):
        return expected
    if isinstance(expected, Mapping):
        return Embeds(expected)
    if _is_sequence(expected):
        return SequenceOf(expected)
    if isinstance(expected, re.Pattern):
        return Regex(expected)
    if callable(expected) and not isinstance(expected, type):
        return Predicate(expected)
    return Equals(expected)


def compare(expected: Any, actual: Any) -> MatchResult:
    """Compare ``actual`` against ``expected`` and return the outcome with its diff."""
    diff = as_matcher(expected).match(actual)
    return MatchResult(passed=diff is None, diff=diff)
