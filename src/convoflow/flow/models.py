"""Stdlib-only models for the flow editor's node/edge JSON.

These are intentionally permissive:
- They accept unknown/extra fields (ignored).
- Node `config` stays an open mapping here; per-kind parsing lives in `configs.py`.

The editor stores nodes in React-Flow shape (`data.config`); a top-level
`config` key is accepted too.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple


class FlowFormatError(ValueError):
    """Raised when flow JSON is not an object/list of the expected shape."""


class EmptyFlowError(ValueError):
    """Raised when a flow has no nodes; nothing can be compiled."""


class NodeKind(str, Enum):
    START = "start"
    TRIGGER = "trigger"
    MESSAGE = "message"
    QUESTION = "question"
    TRANSFER = "transfer"
    END = "end"
    DELAY = "delay"
    APPOINTMENT = "appointment"
    FORM = "form"
    WEBHOOK = "webhook"
    PLAY_AUDIO = "play_audio"
    CONDITION = "condition"
    UNKNOWN = "unknown"


# Editor/template spellings that compile like a canonical kind.
NODE_KIND_ALIASES: Dict[str, NodeKind] = {
    "transfer_call": NodeKind.TRANSFER,
    "phone_transfer": NodeKind.TRANSFER,
    "end_call": NodeKind.END,
    "hangup": NodeKind.END,
    "wait": NodeKind.DELAY,
    "pause": NodeKind.DELAY,
    "form_submission": NodeKind.FORM,
    "collect_info": NodeKind.FORM,
    "api_call": NodeKind.WEBHOOK,
    "tool": NodeKind.WEBHOOK,
}


@dataclass(frozen=True)
class Position:
    x: float = 0
    y: float = 0

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class FlowNode:
    id: str
    type: str = ""
    position: Position = field(default_factory=Position)
    config: Dict[str, Any] = field(default_factory=dict)
    # Remaining `data` keys; templates sometimes keep webhook settings there.
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def semantic_type(self) -> str:
        t = self.config.get("type")
        if isinstance(t, str) and t.strip():
            return t.strip()
        if self.type:
            return self.type
        return "unknown"

    @property
    def kind(self) -> NodeKind:
        return node_kind(self.semantic_type)


@dataclass(frozen=True)
class FlowEdge:
    id: str
    source: str
    target: str
    sourceHandle: Optional[str] = None


@dataclass(frozen=True)
class FlowGraph:
    nodes: Tuple[FlowNode, ...] = ()
    edges: Tuple[FlowEdge, ...] = ()

    def node(self, node_id: str) -> Optional[FlowNode]:
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None

    def outgoing(self, node_id: str) -> List[FlowEdge]:
        return [e for e in self.edges if e.source == node_id]

    def incoming(self, node_id: str) -> List[FlowEdge]:
        return [e for e in self.edges if e.target == node_id]


def node_kind(semantic_type: str) -> NodeKind:
    s = str(semantic_type or "").strip().lower()
    alias = NODE_KIND_ALIASES.get(s)
    if alias is not None:
        return alias
    try:
        return NodeKind(s)
    except ValueError:
        return NodeKind.UNKNOWN


def _coerce_number(value: Any) -> float:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0


def _parse_position(raw: Any) -> Position:
    if not isinstance(raw, dict):
        return Position()
    return Position(x=_coerce_number(raw.get("x")), y=_coerce_number(raw.get("y")))


def _parse_node(raw: Mapping[str, Any]) -> Optional[FlowNode]:
    nid = str(raw.get("id") or "").strip()
    if not nid:
        return None
    data = raw.get("data")
    data_d: Dict[str, Any] = dict(data) if isinstance(data, dict) else {}
    config = data_d.pop("config", None)
    if not isinstance(config, dict):
        config = raw.get("config")
    config_d = dict(config) if isinstance(config, dict) else {}
    ntype = raw.get("type")
    return FlowNode(
        id=nid,
        type=str(ntype).strip() if isinstance(ntype, str) else "",
        position=_parse_position(raw.get("position")),
        config=config_d,
        data=data_d,
    )


def _parse_edge(raw: Mapping[str, Any], index: int) -> Optional[FlowEdge]:
    src = str(raw.get("source") or "").strip()
    tgt = str(raw.get("target") or "").strip()
    if not src or not tgt:
        return None
    eid = str(raw.get("id") or "").strip() or f"e{index}"
    sh = raw.get("sourceHandle")
    handle = sh.strip() if isinstance(sh, str) and sh.strip() else None
    return FlowEdge(id=eid, source=src, target=tgt, sourceHandle=handle)


def load_flow_graph(nodes: Any, edges: Any = None) -> FlowGraph:
    """Parse editor JSON (lists of node/edge dicts) into a `FlowGraph`.

    Also accepts a single object `{"nodes": [...], "edges": [...]}` as `nodes`.
    Entries that are not objects, nodes without an id and edges without both
    endpoints are skipped.
    """
    if isinstance(nodes, dict) and edges is None:
        edges = nodes.get("edges")
        nodes = nodes.get("nodes")
    if nodes is None:
        nodes = []
    if edges is None:
        edges = []
    if not isinstance(nodes, list):
        raise FlowFormatError("Flow nodes must be a JSON array")
    if not isinstance(edges, list):
        raise FlowFormatError("Flow edges must be a JSON array")

    parsed_nodes: List[FlowNode] = []
    for n in nodes:
        if isinstance(n, FlowNode):
            parsed_nodes.append(n)
            continue
        if not isinstance(n, dict):
            continue
        node = _parse_node(n)
        if node is not None:
            parsed_nodes.append(node)

    parsed_edges: List[FlowEdge] = []
    for i, e in enumerate(edges):
        if isinstance(e, FlowEdge):
            parsed_edges.append(e)
            continue
        if not isinstance(e, dict):
            continue
        edge = _parse_edge(e, i)
        if edge is not None:
            parsed_edges.append(edge)

    return FlowGraph(nodes=tuple(parsed_nodes), edges=tuple(parsed_edges))


def as_flow_graph(value: Any, edges: Optional[Iterable[Any]] = None) -> FlowGraph:
    if isinstance(value, FlowGraph):
        return value
    return load_flow_graph(value, list(edges) if edges is not None else None)
