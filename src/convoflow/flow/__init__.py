"""Flow graph input model (editor JSON → frozen dataclasses)."""

from .configs import BranchRule, NodeConfig, parse_node_config
from .forms import (
    FormDefinition,
    FormFieldDefinition,
    FormStore,
    InMemoryFormStore,
    enrich_form_nodes,
)
from .models import (
    EmptyFlowError,
    FlowEdge,
    FlowFormatError,
    FlowGraph,
    FlowNode,
    NodeKind,
    Position,
    load_flow_graph,
    node_kind,
)

__all__ = [
    "BranchRule",
    "EmptyFlowError",
    "FlowEdge",
    "FlowFormatError",
    "FlowGraph",
    "FlowNode",
    "FormDefinition",
    "FormFieldDefinition",
    "FormStore",
    "InMemoryFormStore",
    "NodeConfig",
    "NodeKind",
    "Position",
    "enrich_form_nodes",
    "load_flow_graph",
    "node_kind",
    "parse_node_config",
]
