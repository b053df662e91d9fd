"""Media segment reference value types.

Each reference type carries an explicit ``kind`` discriminant so that
comparators can dispatch on it instead of probing types. The location
list is produced lazily by a ``uris`` callable, which is why two
references describing the same segment are usually not ``==``: the
callables differ even when the locations they produce do not.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, ClassVar, Sequence

UrisFactory = Callable[[], Sequence[str]]


class ReferenceKind(Enum):
    """Discriminant for reference value types."""
    SEGMENT = 'segment'
    INIT_SEGMENT = 'init_segment'


def static_uris(*uris: str) -> UrisFactory:
    """Return a uris callable producing a fixed location list."""
    frozen = list(uris)
    return lambda: list(frozen)


@dataclass(frozen=True, eq=False)
class InitSegmentReference:
    """Byte range of an initialization segment.

    ``end_byte`` is inclusive; None means "to the end of the resource".
    """
    kind: ClassVar[ReferenceKind] = ReferenceKind.INIT_SEGMENT

    uris: UrisFactory
    start_byte: int = 0
    end_byte: int | None = None

    def get_uris(self) -> Sequence[str]:
        return self.uris()


@dataclass(frozen=True, eq=False)
class SegmentReference:
    """Time and byte range of a media segment at a position in a stream."""
    kind: ClassVar[ReferenceKind] = ReferenceKind.SEGMENT

    position: int
    start_time: float
    end_time: float
    uris: UrisFactory
    start_byte: int = 0
    end_byte: int | None = None

    def get_uris(self) -> Sequence[str]:
        return self.uris()
