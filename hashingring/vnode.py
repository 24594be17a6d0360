"""
Virtual nodes and the key buckets they own.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional

from sortedcontainers import SortedKeyList


@dataclass(eq=False)
class DataEntry:
    """
    One stored key. The angle is computed once at insertion and never changes;
    only the bucket holding the entry does.
    """

    __slots__ = ("key", "angle", "value")

    key: Any
    angle: float
    value: Any


def _entry_angle(entry: DataEntry) -> float:
    return entry.angle


class Bucket:
    """
    Key -> DataEntry mapping, also kept ordered by key angle so that an arc
    of entries can be split off without scanning the whole bucket.
    """

    def __init__(self, entries: Iterable[DataEntry] = ()):
        self._by_key: Dict[Any, DataEntry] = {}
        self._by_angle = SortedKeyList(key=_entry_angle)
        self.update(entries)

    def __len__(self) -> int:
        return len(self._by_key)

    def __contains__(self, key: Any) -> bool:
        return key in self._by_key

    def __iter__(self) -> Iterator[DataEntry]:
        return iter(self._by_key.values())

    def get(self, key: Any) -> Optional[DataEntry]:
        return self._by_key.get(key)

    def put(self, key: Any, angle: float, value: Any) -> Optional[DataEntry]:
        """
        Insert or overwrite. Returns the previous entry (already updated in
        place) or None when the key is new.
        """
        entry = self._by_key.get(key)
        if entry is not None:
            previous = DataEntry(entry.key, entry.angle, entry.value)
            entry.value = value
            return previous

        entry = DataEntry(key, angle, value)
        self._by_key[key] = entry
        self._by_angle.add(entry)
        return None

    def pop(self, key: Any) -> Optional[DataEntry]:
        entry = self._by_key.pop(key, None)
        if entry is not None:
            self._by_angle.remove(entry)
        return entry

    def update(self, entries: Iterable[DataEntry]) -> None:
        entries = list(entries)
        for entry in entries:
            self._by_key[entry.key] = entry
        self._by_angle.update(entries)

    def split(self, lo: float, hi: float) -> List[DataEntry]:
        """
        Remove and return every entry with lo <= angle < hi.
        """
        start = self._by_angle.bisect_key_left(lo)
        stop = self._by_angle.bisect_key_left(hi)
        moved = self._by_angle[start:stop]
        del self._by_angle[start:stop]
        for entry in moved:
            del self._by_key[entry.key]
        return moved

    def drain(self) -> List[DataEntry]:
        entries = list(self._by_angle)
        self.clear()
        return entries

    def clear(self) -> None:
        self._by_key.clear()
        self._by_angle.clear()

    def angles(self) -> List[float]:
        return [e.angle for e in self._by_angle]


@dataclass(eq=False)
class VirtualNode:
    """
    One placed replica of a physical node.

    Owns the half-open arc [predecessor.angle, angle) of the ring; the
    globally-first vnode also owns the wraparound arc.
    """

    owner: str
    index: int
    angle: float
    bucket: Bucket = field(default_factory=Bucket, repr=False)

    @property
    def vnode_id(self) -> str:
        return f"{self.owner}-{self.index}"

    def size(self) -> int:
        return len(self.bucket)

    def __str__(self) -> str:
        return f"name='{self.vnode_id}', angle={self.angle}"
