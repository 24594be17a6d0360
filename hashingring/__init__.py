from .angles import AngleMapper, angle_of_hash, default_hash, fold_hash
from .config import RingConfig
from .registry import NodeRegistry
from .ring import Ring
from .ring_map import RingMap
from .vnode import Bucket, DataEntry, VirtualNode

__all__ = [
    "AngleMapper",
    "Bucket",
    "DataEntry",
    "NodeRegistry",
    "Ring",
    "RingConfig",
    "RingMap",
    "VirtualNode",
    "angle_of_hash",
    "default_hash",
    "fold_hash",
]
