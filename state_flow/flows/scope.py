"""Binding scope and breadcrumb tracking for flow execution."""

from collections import ChainMap
from collections.abc import Mapping
from typing import Any, Iterator, Optional, Tuple

from ..errors import UnboundSymbolError
from .session import RunSession


class Bindings(Mapping):
    """Read-only view of the names bound so far, handed to deferred entries."""

    def __init__(self, chain: ChainMap) -> None:
        self._chain = chain

    def __getitem__(self, name: str) -> Any:
        try:
            return self._chain[name]
        except KeyError:
            raise UnboundSymbolError(name, self._chain.keys()) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._chain)

    def __len__(self) -> int:
        return len(self._chain)

    def __repr__(self) -> str:
        return f"Bindings({dict(self._chain)!r})"


class Scope:
    """Immutable execution context passed to every transition.

    Carries the label path of the enclosing flows, the binding lineage and the
    session of the run. ``enter`` and ``bind`` return new scopes, so a binding
    made inside a flow is never seen by the flow that contains it.
    """

    __slots__ = ("labels", "session", "_chain")

    def __init__(
        self,
        session: RunSession,
        labels: Tuple[str, ...] = (),
        chain: Optional[ChainMap] = None,
    ) -> None:
        self.session = session
        self.labels = labels
        self._chain = chain if chain is not None else ChainMap()

    @classmethod
    def root(cls, session: Optional[RunSession] = None) -> "Scope":
        return cls(session or RunSession())

    def enter(self, label: str) -> "Scope":
        return Scope(self.session, self.labels + (label,), self._chain)

    def bind(self, name: str, value: Any) -> "Scope":
        return Scope(self.session, self.labels, self._chain.new_child({name: value}))

    @property
    def bindings(self) -> Bindings:
        return Bindings(self._chain)

    @property
    def breadcrumb(self) -> str:
        return self.session.breadcrumb_separator.join(self.labels)
