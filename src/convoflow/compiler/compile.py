"""Flow graph → engine workflow compiler entry point.

`compile_flow()` is pure and synchronous: form enrichment reads from the given
`FormStore`, everything else is in-memory. A fresh `WorkflowGraph` is built on
every call.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from ..core.config import CompilerConfig
from ..flow.forms import FormStore, enrich_form_nodes
from ..flow.models import EmptyFlowError, as_flow_graph
from ..logging import get_logger
from ..workflow.models import WorkflowGraph
from .assembler import GraphAssembler
from .conditions import resolve_conditions
from .entry import resolve_entry
from .features import FeatureReport, analyze_features
from .nodes import compile_node
from .validator import ValidationResult, validate_workflow

logger = get_logger(__name__)


@dataclass
class CompileResult:
    workflow: WorkflowGraph
    first_message: Optional[str] = None
    entry_node_id: Optional[str] = None
    features: FeatureReport = field(default_factory=FeatureReport)
    validation: ValidationResult = field(default_factory=ValidationResult)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"workflow": self.workflow.to_dict()}
        if self.first_message is not None:
            out["firstMessage"] = self.first_message
        out.update(self.features.to_dict())
        out["validation"] = self.validation.to_dict()
        return out


def compile_flow(
    nodes: Any,
    edges: Any = None,
    *,
    form_store: Optional[FormStore] = None,
    config: Optional[CompilerConfig] = None,
) -> CompileResult:
    """Compile editor nodes/edges (or a `FlowGraph`) into a `CompileResult`.

    Raises:
        EmptyFlowError: the flow has no nodes (checked before any other stage).
        FlowFormatError: `nodes`/`edges` are not JSON arrays.
    """
    graph = as_flow_graph(nodes, edges)
    if not graph.nodes:
        raise EmptyFlowError("Flow has no nodes; nothing to compile")

    cfg = config or CompilerConfig()
    if form_store is not None:
        graph = replace(graph, nodes=tuple(enrich_form_nodes(graph.nodes, form_store)))

    entry = resolve_entry(graph, cfg)

    assembler = GraphAssembler(cfg)
    for node in graph.nodes:
        compiled = compile_node(node, is_entry=node.id == entry.entry_node_id, config=cfg)
        if compiled is not None:
            assembler.add_node(node.id, compiled)

    for pending in resolve_conditions(graph, cfg):
        assembler.add_edge(pending.source, pending.target, pending.guard)
    assembler.wire_entry(entry.entry_node_id)

    workflow = assembler.build()
    features = analyze_features(graph.nodes, workflow, cfg)
    validation = validate_workflow(workflow)
    if not validation.valid:
        logger.warning("Compiled workflow failed validation", errors=validation.errors)
    for w in validation.warnings:
        logger.info("Workflow validation warning", warning=w)

    logger.debug(
        "Compiled flow",
        nodes=len(workflow.nodes),
        edges=len(workflow.edges),
        entry_node_id=entry.entry_node_id,
        tool_ids=features.tool_ids,
    )
    return CompileResult(
        workflow=workflow,
        first_message=entry.first_message,
        entry_node_id=entry.entry_node_id,
        features=features,
        validation=validation,
    )
