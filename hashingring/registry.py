from typing import Dict, Iterator, List, Optional

from .vnode import VirtualNode


class NodeRegistry:
    """
    Physical node name -> its virtual nodes, in weight-index order.
    """

    def __init__(self):
        self._nodes: Dict[str, List[VirtualNode]] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def register(self, name: str) -> List[VirtualNode]:
        if name in self._nodes:
            raise ValueError(f"Node {name} already exists")
        vnodes: List[VirtualNode] = []
        self._nodes[name] = vnodes
        return vnodes

    def vnodes_of(self, name: str) -> Optional[List[VirtualNode]]:
        return self._nodes.get(name)

    def unregister(self, name: str) -> Optional[List[VirtualNode]]:
        return self._nodes.pop(name, None)

    def names(self) -> List[str]:
        return list(self._nodes)
