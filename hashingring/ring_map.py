import logging
import random
from collections.abc import MutableMapping
from typing import Any, Iterable, Iterator, List, Optional, Tuple, Union

from .angles import FULL_CIRCLE, AngleMapper, HashFunc, default_hash
from .config import DEFAULT_NODE_PREFIX, DEFAULT_NODE_WEIGHT, RingConfig
from .registry import NodeRegistry
from .ring import Ring
from .vnode import VirtualNode

log = logging.getLogger(__name__)


class RingMap(MutableMapping):
    """
    Key-value map sharded over a consistent hashing ring with virtual nodes.

    - ring: vnodes ordered by angle, the only authority on key ownership
    - registry: physical node name -> its vnodes
    - every key is stored once, in the bucket of the vnode owning its angle

    Each physical node gets node_weight vnodes, one randomly placed inside
    each of node_weight equal slices of the circle. Adding a node only splits
    the arcs its new vnodes land in; removing one merges each of its buckets
    into the next vnode clockwise.

    Not thread-safe: callers sharing a RingMap must serialize access.
    """

    def __init__(
        self,
        initial_nodes: int = 1,
        node_weight: int = DEFAULT_NODE_WEIGHT,
        hash_func: HashFunc = default_hash,
        rng: Optional[random.Random] = None,
        node_prefix: str = DEFAULT_NODE_PREFIX,
    ):
        if node_weight <= 0:
            raise ValueError("node_weight must be positive")
        if initial_nodes <= 0:
            raise ValueError("initial_nodes must be positive")

        self.node_weight = node_weight
        self.node_prefix = node_prefix
        self.mapper = AngleMapper(hash_func)
        self.rng = rng if rng is not None else random.Random()

        self.ring = Ring()
        self.registry = NodeRegistry()
        self._size = 0
        self._next_auto = 0

        self._add_nodes(self._auto_names(initial_nodes))

    @classmethod
    def from_config(cls, config: RingConfig, hash_func: HashFunc = default_hash) -> "RingMap":
        return cls(
            initial_nodes=config.initial_nodes,
            node_weight=config.node_weight,
            hash_func=hash_func,
            rng=config.make_rng(),
            node_prefix=config.node_prefix,
        )

    # ---------- node management ----------

    def add_node(self, node: Union[str, int]) -> int:
        """
        Add one named physical node, or `node` auto-named ones when given an int.
        Returns the number of entries migrated into the new vnodes.
        """
        if isinstance(node, bool):
            raise TypeError("node must be a name or a count, not a bool")
        if isinstance(node, int):
            return self.add_nodes(node)
        return self._add_nodes([node])

    def add_nodes(self, count: int) -> int:
        if isinstance(count, bool):
            raise TypeError("count must be an int, not a bool")
        if count < 0:
            raise ValueError("count must not be negative")
        return self._add_nodes(self._auto_names(count))

    def remove_node(self, name: str) -> int:
        """
        Remove a physical node, merging each of its buckets into the vnode that
        follows it on the ring. Unknown names are ignored.
        Returns the number of entries merged.
        """
        vnodes = self.registry.vnodes_of(name)
        if vnodes is None:
            return 0
        if len(self.registry) == 1:
            raise ValueError(f"Cannot remove {name}, it is the last node")

        merged = 0
        for vnode in vnodes:
            self.ring.remove(vnode)
            successor = self.ring.owner_of(vnode.angle)
            entries = vnode.bucket.drain()
            successor.bucket.update(entries)
            merged += len(entries)

        self.registry.unregister(name)
        log.info("Removed node %s, merged %d entries", name, merged)
        return merged

    def node_names(self) -> List[str]:
        return self.registry.names()

    def vnodes(self) -> List[VirtualNode]:
        return list(self.ring)

    def _auto_names(self, count: int) -> List[str]:
        names: List[str] = []
        while len(names) < count:
            name = f"{self.node_prefix}{self._next_auto}"
            self._next_auto += 1
            if name not in self.registry:
                names.append(name)
        return names

    def _add_nodes(self, names: Iterable[str]) -> int:
        names = list(names)
        for name in names:
            if name in self.registry:
                raise ValueError(f"Node {name} already exists")

        moved = 0
        for name in names:
            vnodes = self.registry.register(name)
            for index in range(self.node_weight):
                vnode = VirtualNode(name, index, self._draw_angle(index))
                moved += self._claim_arc(vnode)
                self.ring.add(vnode)
                vnodes.append(vnode)
            log.debug("Added node %s with %d vnodes", name, self.node_weight)

        if self._size:
            log.info("Moved around %s%%", moved / self._size * 100.0)
        return moved

    def _slice_bounds(self, index: int) -> Tuple[float, float]:
        width = FULL_CIRCLE / self.node_weight
        lo = index * width
        hi = FULL_CIRCLE if index == self.node_weight - 1 else (index + 1) * width
        return lo, hi

    def _draw_angle(self, index: int) -> float:
        """
        Random angle inside slice `index`, redrawn until no vnode sits on it.
        0.0 is never used, it is where INT32_MIN keys wrap to.
        """
        lo, hi = self._slice_bounds(index)
        while True:
            angle = lo + (hi - lo) * self.rng.random()
            if 0.0 < angle < hi and angle not in self.ring:
                return angle
            log.warning("Clash with angle %r in [%r, %r), trying again.", angle, lo, hi)

    def _claim_arc(self, vnode: VirtualNode) -> int:
        """
        Move into vnode the entries it will own once inserted. Only the current
        owner of vnode's angle (its successor) is touched.
        """
        if not self.ring:
            return 0

        successor = self.ring.owner_of(vnode.angle)
        lower = self.ring.predecessor_of(vnode.angle).angle
        bucket = successor.bucket
        if lower < vnode.angle:
            moved = bucket.split(lower, vnode.angle)
        else:
            # vnode becomes the globally-first one and takes the wraparound arc
            moved = bucket.split(lower, FULL_CIRCLE) + bucket.split(0.0, vnode.angle)
        vnode.bucket.update(moved)
        return len(moved)

    # ---------- key operations ----------

    def _locate(self, key: Any) -> Tuple[float, VirtualNode]:
        angle = self.mapper.angle_of(key)
        return angle, self.ring.owner_of(angle)

    def put(self, key: Any, value: Any) -> Any:
        angle, vnode = self._locate(key)
        previous = vnode.bucket.put(key, angle, value)
        if previous is None:
            self._size += 1
            return None
        return previous.value

    def get(self, key: Any, default: Any = None) -> Any:
        _, vnode = self._locate(key)
        entry = vnode.bucket.get(key)
        if entry is None:
            return default
        return entry.value

    def remove(self, key: Any) -> Any:
        _, vnode = self._locate(key)
        entry = vnode.bucket.pop(key)
        if entry is None:
            return None
        self._size -= 1
        return entry.value

    def contains_key(self, key: Any) -> bool:
        _, vnode = self._locate(key)
        return key in vnode.bucket

    def clear(self) -> None:
        for vnode in self.ring:
            vnode.bucket.clear()
        self._size = 0

    def size(self) -> int:
        return self._size

    def node_for(self, key: Any) -> str:
        """
        Physical node currently owning key, stored or not.
        """
        return self._locate(key)[1].owner

    # ---------- mapping protocol ----------

    def __getitem__(self, key: Any) -> Any:
        _, vnode = self._locate(key)
        entry = vnode.bucket.get(key)
        if entry is None:
            raise KeyError(key)
        return entry.value

    def __setitem__(self, key: Any, value: Any) -> None:
        self.put(key, value)

    def __delitem__(self, key: Any) -> None:
        _, vnode = self._locate(key)
        if vnode.bucket.pop(key) is None:
            raise KeyError(key)
        self._size -= 1

    def __contains__(self, key: Any) -> bool:
        return self.contains_key(key)

    def __iter__(self) -> Iterator[Any]:
        for vnode in self.ring:
            for entry in vnode.bucket:
                yield entry.key

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(nodes={len(self.registry)}, "
            f"vnodes={len(self.ring)}, size={self._size})"
        )

    # ---------- consistency check ----------

    def verify(self) -> None:
        """
        Walk every bucket and raise RuntimeError on the first broken invariant:
        vnode angles in range, each physical node holding node_weight vnodes,
        each entry held by the vnode owning its angle, and the live-key count
        matching the bucket totals.
        """
        if not self.ring:
            raise RuntimeError("Ring is empty")

        expected_vnodes = len(self.registry) * self.node_weight
        if len(self.ring) != expected_vnodes:
            raise RuntimeError(f"Ring holds {len(self.ring)} vnodes, expected {expected_vnodes}")
        for name in self.registry:
            vnodes = self.registry.vnodes_of(name)
            if len(vnodes) != self.node_weight:
                raise RuntimeError(f"Node {name} has {len(vnodes)} vnodes")
            for vnode in vnodes:
                if vnode.angle not in self.ring:
                    raise RuntimeError(f"Vnode {vnode.vnode_id} is missing from the ring")

        total = 0
        for vnode in self.ring:
            if not 0.0 <= vnode.angle < FULL_CIRCLE:
                raise RuntimeError(f"Vnode {vnode.vnode_id} has angle {vnode.angle} out of range")
            for entry in vnode.bucket:
                owner = self.ring.owner_of(entry.angle)
                if owner is not vnode:
                    raise RuntimeError(
                        f"Entry {entry.key!r} at angle {entry.angle} is held by "
                        f"{vnode.vnode_id} but owned by {owner.vnode_id}"
                    )
            total += vnode.size()

        if total != self._size:
            raise RuntimeError(f"Buckets hold {total} entries but size is {self._size}")
