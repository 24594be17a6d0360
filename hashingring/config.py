import random
from dataclasses import dataclass
from typing import Optional

DEFAULT_NODE_WEIGHT = 100
DEFAULT_NODE_PREFIX = "Node "


@dataclass(frozen=True)
class RingConfig:
    """
    Construction settings for a RingMap.

    node_weight is the number of virtual nodes per physical node; it controls
    how smoothly keys spread, not how many copies are kept. A seed makes vnode
    placement reproducible.
    """

    initial_nodes: int = 1
    node_weight: int = DEFAULT_NODE_WEIGHT
    node_prefix: str = DEFAULT_NODE_PREFIX
    seed: Optional[int] = None

    def __post_init__(self):
        if self.initial_nodes <= 0:
            raise ValueError("initial_nodes must be positive")
        if self.node_weight <= 0:
            raise ValueError("node_weight must be positive")

    def make_rng(self) -> random.Random:
        return random.Random(self.seed)
