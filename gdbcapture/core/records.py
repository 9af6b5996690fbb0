"""Typed records produced by the extractors.

Each record kind is a dataclass whose fields all default to a zero value, so a
freshly allocated record carries nothing until an extractor fills it in.
Records are grouped into a ``RecordChain``:

1. Order is encounter order (the order lines were parsed), never sorted.
2. A chain owns its records; no record is shared between two chains.
3. ``release()`` disposes of every record exactly once, head first. Releasing
   an already released chain is a no-op.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
import logging
from typing import TYPE_CHECKING
from typing import Callable
from typing import Generic
from typing import TypeVar
from typing import overload

if TYPE_CHECKING:
    from collections.abc import Iterator
    import types

logger = logging.getLogger(__name__)


class CatchKind(Enum):
    """Event a catchpoint triggers on; the value is the ``catch`` keyword."""

    THROW = "throw"
    CATCH = "catch"
    EXEC = "exec"
    FORK = "fork"
    VFORK = "vfork"
    LOAD = "load"
    UNLOAD = "unload"
    SYSCALL = "syscall"
    SIGNAL = "signal"
    ASSERT = "assert"


@dataclass
class Catchpoint:
    """A catchpoint as reported through the breakpoint grammar.

    Attributes:
        number: Breakpoint number (catchpoints share the breakpoint space).
        kind: Event kind from the request that created it.
        enabled: Whether the catchpoint is enabled.
        condition: Optional condition expression.
        hit_count: Times the catchpoint has triggered.
        event: Filter given at creation (library regexp, syscall or signal).
        temporary: True when the disposition is delete-on-hit.
    """

    number: int = 0
    kind: CatchKind | None = None
    enabled: bool = False
    condition: str | None = None
    hit_count: int = 0
    event: str | None = None
    temporary: bool = False


@dataclass
class Symbol:
    name: str | None = None
    kind: str | None = None
    address: int | None = None
    file: str | None = None
    line: int | None = None
    linkage_name: str | None = None


@dataclass
class LineInfo:
    file: str | None = None
    line: int = 0
    start_address: int | None = None
    end_address: int | None = None


@dataclass
class Function:
    """A function entry from ``info functions``.

    ``return_type`` is not printed on address entries and stays None unless a
    caller fills it in.
    """

    name: str | None = None
    file: str | None = None
    line: int | None = None
    address: int | None = None
    signature: str | None = None
    return_type: str | None = None
    is_static: bool = False


@dataclass
class TypeInfo:
    """Type description from ``ptype``/``whatis``/``info types``.

    ``members`` holds the complete captured body for ``ptype``/``whatis``, or
    the declaration line for ``info types`` entries.
    """

    name: str | None = None
    kind: str | None = None
    members: str | None = None
    file: str | None = None
    line: int | None = None


@dataclass
class Variable:
    """A variable declaration from ``info variables``.

    Declarations carry no address; ``address`` is left for callers that
    resolve it, e.g. with ``info_address``.
    """

    name: str | None = None
    type: str | None = None
    file: str | None = None
    line: int | None = None
    is_static: bool = False
    is_global: bool = False
    address: int | None = None


@dataclass
class SourceLine:
    line_number: int = 0
    text: str | None = None
    is_current: bool = False
    has_breakpoint: bool = False


R = TypeVar("R")


def _reset_record(record: object) -> None:
    """Drop everything a record owns by restoring each field's zero value."""
    for f in dataclasses.fields(record):  # type: ignore[arg-type]
        if f.default is not dataclasses.MISSING:
            setattr(record, f.name, f.default)
        elif f.default_factory is not dataclasses.MISSING:
            setattr(record, f.name, f.default_factory())


class RecordChain(Generic[R]):
    """Ordered, owned sequence of records of one kind.

    Stands in for a singly linked list: ``allocate()`` appends a zero-valued
    record and returns it for the extractor to fill, iteration follows
    encounter order, and ``release()`` disposes of the whole chain at once.
    Use the chain as a context manager to release it on scope exit.
    """

    def __init__(self, factory: Callable[[], R]) -> None:
        self._factory = factory
        self._records: list[R] = []
        self._released = False

    @property
    def kind(self) -> str:
        return getattr(self._factory, "__name__", repr(self._factory))

    @property
    def released(self) -> bool:
        return self._released

    def allocate(self) -> R:
        """Append a new zero-valued record and return it."""
        if self._released:
            raise RuntimeError(f"Cannot allocate into a released {self.kind} chain")
        record = self._factory()
        self._records.append(record)
        return record

    def release(self) -> int:
        """Release every record in the chain.

        Returns:
            The number of records released; 0 if the chain was already released.
        """
        if self._released:
            return 0
        count = len(self._records)
        for record in self._records:
            _reset_record(record)
        self._records.clear()
        self._released = True
        logger.debug("Released %d %s record(s)", count, self.kind)
        return count

    @property
    def head(self) -> R | None:
        return self._records[0] if self._records else None

    def __enter__(self) -> RecordChain[R]:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        self.release()

    def __iter__(self) -> Iterator[R]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __bool__(self) -> bool:
        return bool(self._records)

    @overload
    def __getitem__(self, index: int) -> R: ...

    @overload
    def __getitem__(self, index: slice) -> list[R]: ...

    def __getitem__(self, index: int | slice) -> R | list[R]:
        return self._records[index]

    def __repr__(self) -> str:
        state = "released" if self._released else f"{len(self._records)} record(s)"
        return f"RecordChain[{self.kind}]({state})"
