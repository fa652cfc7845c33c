"""Structural checks on a finished workflow graph.

Validation never raises; callers inspect `ValidationResult` and decide whether
to block activation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Set

from ..workflow.models import StartNode, TerminalNode, TransferNode, WorkflowGraph


@dataclass(frozen=True)
class ValidationResult:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": self.valid, "errors": list(self.errors), "warnings": list(self.warnings)}


def _reachable(workflow: WorkflowGraph, roots: List[str]) -> Set[str]:
    seen: Set[str] = set()
    stack = list(roots)
    while stack:
        nid = stack.pop()
        if nid in seen:
            continue
        seen.add(nid)
        for e in workflow.outgoing(nid):
            if e.target in workflow.nodes:
                stack.append(e.target)
    return seen


def validate_workflow(workflow: WorkflowGraph) -> ValidationResult:
    errors: List[str] = []
    warnings: List[str] = []

    start_ids = workflow.start_node_ids()
    if not any(not isinstance(n, StartNode) for n in workflow.nodes.values()):
        errors.append("Workflow must have at least one node besides start")
    if not start_ids:
        errors.append("Workflow must have a start node")
    elif len(start_ids) > 1:
        errors.append(f"Workflow must have exactly one start node, found {len(start_ids)}")

    for eid, e in workflow.edges.items():
        if e.target not in workflow.nodes:
            errors.append(f"Edge {eid} targets non-existent node {e.target}")
        if e.source not in workflow.nodes:
            errors.append(f"Edge {eid} has non-existent source {e.source}")

    if start_ids:
        reachable = _reachable(workflow, start_ids)
        for nid in workflow.nodes:
            if nid not in reachable:
                warnings.append(f"Node {nid} is not reachable from start")

    for nid, n in workflow.nodes.items():
        if isinstance(n, (StartNode, TerminalNode, TransferNode)):
            continue
        if not workflow.outgoing(nid):
            warnings.append(f"Node {nid} has no outgoing edges and is not an end or transfer node")

    return ValidationResult(errors=errors, warnings=warnings)
