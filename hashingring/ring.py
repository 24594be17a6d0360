"""
Ordered index of virtual nodes by angle.

A query angle is owned by the vnode with the smallest angle strictly greater
than it; past the last vnode ownership wraps to the first one. An angle equal
to a vnode's angle therefore belongs to that vnode's successor.
"""
from typing import Iterator, List

from sortedcontainers import SortedDict

from .vnode import VirtualNode


class Ring:
    def __init__(self):
        self._vnodes = SortedDict()

    def __len__(self) -> int:
        return len(self._vnodes)

    def __bool__(self) -> bool:
        return bool(self._vnodes)

    def __iter__(self) -> Iterator[VirtualNode]:
        return iter(self._vnodes.values())

    def __contains__(self, angle: float) -> bool:
        return angle in self._vnodes

    # ---------- structure ----------

    def add(self, vnode: VirtualNode) -> None:
        if vnode.angle in self._vnodes:
            raise ValueError(f"Angle {vnode.angle} is already taken")
        self._vnodes[vnode.angle] = vnode

    def remove(self, vnode: VirtualNode) -> None:
        if self._vnodes.get(vnode.angle) is not vnode:
            raise ValueError(f"Vnode {vnode.vnode_id} is not on the ring")
        del self._vnodes[vnode.angle]

    def first(self) -> VirtualNode:
        self._require_nodes()
        return self._vnodes.peekitem(0)[1]

    def last(self) -> VirtualNode:
        self._require_nodes()
        return self._vnodes.peekitem(-1)[1]

    def angles(self) -> List[float]:
        return list(self._vnodes.keys())

    # ---------- lookup ----------

    def owner_of(self, angle: float) -> VirtualNode:
        """
        Return the vnode owning angle: first vnode clockwise, strictly after it.
        """
        self._require_nodes()
        idx = self._vnodes.bisect_right(angle)
        if idx == len(self._vnodes):
            idx = 0
        return self._vnodes.peekitem(idx)[1]

    def predecessor_of(self, angle: float) -> VirtualNode:
        """
        Return the vnode with the largest angle strictly below angle, wrapping
        to the last vnode.
        """
        self._require_nodes()
        idx = self._vnodes.bisect_left(angle) - 1
        return self._vnodes.peekitem(idx)[1]

    def _require_nodes(self) -> None:
        if not self._vnodes:
            raise RuntimeError("Ring is empty")
