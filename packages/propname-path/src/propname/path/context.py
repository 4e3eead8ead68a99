from contextlib import contextmanager
from contextvars import ContextVar
from typing import Dict, Iterator, Mapping, Tuple

from propname.spec import EmptyPathError, PathContextProtocol

# One variable for every PathContext: maps a context to its pending segments.
# Only contexts with a non-empty path have an entry.
_PENDING: ContextVar[Mapping["PathContext", Tuple[str, ...]]] = ContextVar(
    "propname.path", default={}
)


class PathContext(PathContextProtocol):
    """
    Accumulates recorded property names for the current execution context.

    The pending path is an immutable tuple stored in a ContextVar, so threads
    and asyncio tasks each see their own value and a copied context diverges
    from its parent instead of sharing state.
    """

    __slots__ = ("name",)

    def __init__(self, name: str = "propname.path"):
        self.name = name

    def _store(self, segments: Tuple[str, ...]) -> None:
        # The mapping is shared with copied contexts, so it is never mutated
        pending: Dict["PathContext", Tuple[str, ...]] = dict(_PENDING.get())
        if segments:
            pending[self] = segments
        else:
            pending.pop(self, None)
        _PENDING.set(pending)

    def append(self, name: str) -> None:
        self._store(self.pending() + (name,))

    def pending(self) -> Tuple[str, ...]:
        return _PENDING.get().get(self, ())

    def drain(self) -> str:
        segments = self.discard()
        if not segments:
            raise EmptyPathError()
        return ".".join(segments)

    def discard(self) -> Tuple[str, ...]:
        segments = self.pending()
        if segments:
            self._store(())
        return segments

    @contextmanager
    def scope(self) -> Iterator["PathContext"]:
        outer = _PENDING.get()
        token = _PENDING.set({k: v for k, v in outer.items() if k is not self})
        try:
            yield self
        finally:
            _PENDING.reset(token)

    def __repr__(self) -> str:
        path = ".".join(self.pending())
        return f"<PathContext: '{path}'>" if path else "<PathContext: (empty)>"
