"""Start resolution: which flow node the synthetic Start node points at."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.config import CompilerConfig
from ..flow.configs import MessageConfig, parse_node_config
from ..flow.models import FlowGraph, FlowNode, NodeKind

_ENTRY_KINDS = (NodeKind.START, NodeKind.TRIGGER)
_NOT_COMPILABLE = (NodeKind.START, NodeKind.TRIGGER, NodeKind.CONDITION)


@dataclass(frozen=True)
class EntryResolution:
    entry_node_id: Optional[str] = None
    first_message: Optional[str] = None


def _compilable(node: Optional[FlowNode]) -> bool:
    return node is not None and node.kind not in _NOT_COMPILABLE


def _entry_node(graph: FlowGraph) -> Optional[FlowNode]:
    # (a) explicit start/trigger: the entry is what its first edge points at.
    for n in graph.nodes:
        if n.kind in _ENTRY_KINDS:
            for e in graph.outgoing(n.id):
                target = graph.node(e.target)
                if _compilable(target):
                    return target
            break

    # (b) a root node.
    targets = {e.target for e in graph.edges}
    for n in graph.nodes:
        if n.id not in targets and _compilable(n):
            return n

    # (c) anything compilable.
    for n in graph.nodes:
        if _compilable(n):
            return n
    return None


def resolve_entry(graph: FlowGraph, config: Optional[CompilerConfig] = None) -> EntryResolution:
    """Resolve the entry node and hoist its text when it is a message node.

    The hoisted text goes to the engine's first-utterance field; the entry node
    itself then only gets a soft "already delivered" instruction.
    """
    node = _entry_node(graph)
    if node is None:
        return EntryResolution()
    first_message: Optional[str] = None
    if node.kind is NodeKind.MESSAGE:
        c = parse_node_config(node, config)
        if isinstance(c, MessageConfig) and c.has_text:
            first_message = c.message
    return EntryResolution(entry_node_id=node.id, first_message=first_message)
