"""Graph Assembler: edge ids, per-node edge order and the synthetic Start node."""

from __future__ import annotations

from typing import Dict, Optional

from ..core.config import CompilerConfig
from ..flow.models import Position
from ..logging import get_logger
from ..workflow.models import UNCONDITIONAL, CompiledEdge, CompiledNode, Guard, StartNode, WorkflowGraph

logger = get_logger(__name__)


class GraphAssembler:
    """Collects compiled nodes and edges for one compile call.

    Edge ids are `edge_<source>_to_<target>_<counter>` with a counter local to
    this assembler. `edge_order` of a node lists its outgoing edges in the
    order they were added.
    """

    def __init__(self, config: Optional[CompilerConfig] = None):
        self._config = config or CompilerConfig()
        self._counter = 0
        self._nodes: Dict[str, CompiledNode] = {
            self._config.start_node_id: StartNode(position=Position(0, 0)),
        }
        self._edges: Dict[str, CompiledEdge] = {}

    @property
    def start_node_id(self) -> str:
        return self._config.start_node_id

    def add_node(self, node_id: str, node: CompiledNode) -> None:
        if node_id in self._nodes:
            logger.warning("Duplicate node id; keeping the first", node_id=node_id)
            return
        self._nodes[node_id] = node

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def add_edge(self, source: str, target: str, guard: Guard = UNCONDITIONAL) -> Optional[str]:
        """Add an edge and return its id, or None when the source was not compiled.

        A target that is not in the graph is kept so validation can report it.
        """
        src = self._nodes.get(source)
        if src is None:
            logger.debug("Skipping edge from uncompiled source", source=source, target=target)
            return None
        self._counter += 1
        edge_id = f"edge_{source}_to_{target}_{self._counter}"
        self._edges[edge_id] = CompiledEdge(id=edge_id, source=source, target=target, guard=guard)
        src.edge_order.append(edge_id)
        return edge_id

    def wire_entry(self, entry_node_id: Optional[str]) -> Optional[str]:
        if not entry_node_id:
            return None
        return self.add_edge(self.start_node_id, entry_node_id)

    def build(self) -> WorkflowGraph:
        return WorkflowGraph(nodes=dict(self._nodes), edges=dict(self._edges))
