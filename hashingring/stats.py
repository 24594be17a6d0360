"""
Distribution statistics for a RingMap.

Observational only: nothing here is read back by the ring.
"""
import logging
from collections import Counter
from typing import Any, Dict, Iterable, List, Sequence, Tuple

import numpy as np

from .ring_map import RingMap

log = logging.getLogger(__name__)


def relative_std_dev(values: Sequence[float]) -> float:
    """
    Population standard deviation as a percentage of the absolute mean.
    """
    data = np.asarray(values, dtype=float)
    if data.size == 0:
        return 0.0
    mean = data.mean()
    if mean == 0:
        return 0.0
    return float(data.std() * 100.0 / abs(mean))


def node_counts(ring_map: RingMap) -> Dict[str, int]:
    """
    Stored keys per physical node, summed over its vnodes.
    """
    counts: Counter = Counter({name: 0 for name in ring_map.node_names()})
    for vnode in ring_map.ring:
        counts[vnode.owner] += vnode.size()
    return dict(counts)


def angle_rsd(ring_map: RingMap) -> float:
    return relative_std_dev(ring_map.ring.angles())


def data_rsd(ring_map: RingMap) -> float:
    return relative_std_dev(list(node_counts(ring_map).values()))


def owner_snapshot(ring_map: RingMap, keys: Iterable[Any]) -> Dict[Any, str]:
    return {k: ring_map.node_for(k) for k in keys}


def moved_keys_ratio(ring_map: RingMap, old_mapping: Dict[Any, str]) -> float:
    """
    Given a previous mapping key -> node name, compute the fraction of keys
    whose owning node changed under the current ring.
    """
    if not old_mapping:
        return 0.0
    moved = sum(1 for k, node in old_mapping.items() if ring_map.node_for(k) != node)
    return moved / len(old_mapping)


def layout(ring_map: RingMap) -> List[Tuple[str, float, int]]:
    """
    (vnode id, angle, stored keys) for every vnode in ring order.
    """
    return [(v.vnode_id, v.angle, v.size()) for v in ring_map.ring]


def log_report(ring_map: RingMap, logger: logging.Logger = log) -> Dict[str, Any]:
    counts = node_counts(ring_map)
    for name, count in counts.items():
        logger.info("Node: %s has count %d", name, count)
    report = {
        "nodes": len(counts),
        "vnodes": len(ring_map.ring),
        "size": ring_map.size(),
        "angle_rsd": angle_rsd(ring_map),
        "data_rsd": relative_std_dev(list(counts.values())),
    }
    logger.info("RSD of nodes on ring %s", report["angle_rsd"])
    logger.info("RSD of data between nodes %s", report["data_rsd"])
    return report
