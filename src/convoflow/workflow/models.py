"""Compiled workflow model (engine-facing).

`WorkflowGraph.to_dict()` produces the exact payload shape the external voice
engine expects under `workflow`:

    {"nodes": {id: {"type", "position", "edge_order", ...}},
     "edges": {id: {"source", "target", "forward_condition"}}}

Node variants are a closed set. Variant-specific fields are only emitted by
the variant that owns them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Union

from ..flow.models import Position


# ---------------------------------------------------------------------------
# Guards
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Unconditional:
    def to_dict(self) -> Dict[str, Any]:
        return {"type": "unconditional"}


@dataclass(frozen=True)
class NaturalLanguageCondition:
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "llm", "condition": self.text}


@dataclass(frozen=True)
class ResultCondition:
    successful: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "result", "successful": self.successful}


Guard = Union[Unconditional, NaturalLanguageCondition, ResultCondition]

UNCONDITIONAL = Unconditional()


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


@dataclass
class CompiledNode:
    position: Position = field(default_factory=Position)
    edge_order: List[str] = field(default_factory=list)

    engine_type = ""

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "type": self.engine_type,
            "position": self.position.to_dict(),
            "edge_order": list(self.edge_order),
        }
        out.update(self._variant_fields())
        return out

    def _variant_fields(self) -> Dict[str, Any]:
        return {}


@dataclass
class StartNode(CompiledNode):
    engine_type = "start"


@dataclass
class _InstructionNode(CompiledNode):
    label: str = ""
    additional_prompt: str = ""
    additional_tool_ids: List[str] = field(default_factory=list)
    additional_knowledge_base: List[Any] = field(default_factory=list)
    conversation_config: Dict[str, Any] = field(default_factory=dict)

    engine_type = "override_agent"

    def _variant_fields(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "additional_prompt": self.additional_prompt,
            "additional_tool_ids": list(self.additional_tool_ids),
            "additional_knowledge_base": list(self.additional_knowledge_base),
            "conversation_config": dict(self.conversation_config),
        }


@dataclass
class ScriptedSpeechNode(_InstructionNode):
    """Speaks author text verbatim; question nodes also name the answer variable."""

    response_variable: Optional[str] = None


@dataclass
class GenericInstructionNode(_InstructionNode):
    """Fallback for node types the compiler does not know."""


@dataclass
class TransferNode(CompiledNode):
    phone_number: str = ""
    transfer_type: str = "conference"

    engine_type = "phone_number"

    def _variant_fields(self) -> Dict[str, Any]:
        return {
            "transfer_destination": {"type": "phone", "phone_number": self.phone_number},
            "transfer_type": self.transfer_type,
        }


@dataclass
class TerminalNode(CompiledNode):
    engine_type = "end"


@dataclass
class ExternalToolInvocationNode(CompiledNode):
    tool_ids: List[str] = field(default_factory=list)

    engine_type = "tool"

    def _variant_fields(self) -> Dict[str, Any]:
        return {"tools": [{"tool_id": t} for t in self.tool_ids]}


# ---------------------------------------------------------------------------
# Edges + graph
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CompiledEdge:
    id: str
    source: str
    target: str
    guard: Guard = UNCONDITIONAL

    def to_dict(self) -> Dict[str, Any]:
        return {"source": self.source, "target": self.target, "forward_condition": self.guard.to_dict()}


@dataclass
class WorkflowGraph:
    nodes: Dict[str, CompiledNode] = field(default_factory=dict)
    edges: Dict[str, CompiledEdge] = field(default_factory=dict)

    def start_node_ids(self) -> List[str]:
        return [nid for nid, n in self.nodes.items() if isinstance(n, StartNode)]

    def tool_nodes(self) -> Iterator[tuple[str, ExternalToolInvocationNode]]:
        for nid, n in self.nodes.items():
            if isinstance(n, ExternalToolInvocationNode):
                yield nid, n

    def outgoing(self, node_id: str) -> List[CompiledEdge]:
        return [e for e in self.edges.values() if e.source == node_id]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": {nid: n.to_dict() for nid, n in self.nodes.items()},
            "edges": {eid: e.to_dict() for eid, e in self.edges.items()},
        }
