import logging
import uuid
from typing import Dict, List

from hashingring import RingConfig, RingMap
from hashingring import stats


def print_distribution(title: str, counts: Dict[str, int]) -> None:
    print(title)
    for node, count in counts.items():
        print(f"{node}: {count}")


# ---------- example usage & test harness ----------

def demo(
    initial_nodes: int = 3,
    node_weight: int = 100,
    key_count: int = 10000,
    seed: int = 7,
) -> Dict[str, float]:
    """
    Simple demonstration of load distribution and minimal key movement
    when adding/removing nodes.
    """
    config = RingConfig(initial_nodes=initial_nodes, node_weight=node_weight, seed=seed)
    ring = RingMap.from_config(config)

    keys: List[str] = [f"key-{i}" for i in range(key_count)]
    for k in keys:
        ring.put(k, uuid.uuid5(uuid.NAMESPACE_OID, k).hex)

    # baseline distribution
    base_owner = stats.owner_snapshot(ring, keys)
    print_distribution("Initial distribution:", stats.node_counts(ring))
    print(f"RSD of data between nodes: {stats.data_rsd(ring):.2f}")

    # add a node
    ring.add_node("node-new")
    moved_after_add = stats.moved_keys_ratio(ring, base_owner)
    print_distribution("\nAfter adding node-new:", stats.node_counts(ring))
    print(f"Fraction of keys moved: {moved_after_add:.4f}")

    # remove one of the initial nodes
    removed = "Node 1"
    ring.remove_node(removed)
    moved_after_remove = stats.moved_keys_ratio(ring, base_owner)
    print_distribution(f"\nAfter removing {removed}:", stats.node_counts(ring))
    print(f"Fraction of keys moved since baseline: {moved_after_remove:.4f}")

    ring.verify()
    return {
        "moved_after_add": moved_after_add,
        "moved_after_remove": moved_after_remove,
        "size": float(ring.size()),
    }


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    demo()
