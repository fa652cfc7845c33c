from __future__ import annotations

import pytest

from convoflow import compile_flow, validate_workflow
from convoflow.workflow import CompiledEdge, ScriptedSpeechNode, StartNode, TerminalNode, WorkflowGraph


pytestmark = pytest.mark.basic


def test_single_non_start_node_reports_missing_start() -> None:
    result = validate_workflow(WorkflowGraph(nodes={"n1": TerminalNode()}))

    assert result.valid is False
    assert "Workflow must have a start node" in result.errors
    assert "Workflow must have at least one node besides start" not in result.errors


def test_start_only_graph_is_invalid() -> None:
    result = validate_workflow(WorkflowGraph(nodes={"start_node": StartNode()}))

    assert result.valid is False
    assert result.errors == ["Workflow must have at least one node besides start"]


def test_empty_graph_collects_every_error() -> None:
    result = validate_workflow(WorkflowGraph())

    assert result.errors == [
        "Workflow must have at least one node besides start",
        "Workflow must have a start node",
    ]


def test_dangling_edges_are_errors_not_exceptions() -> None:
    wf = WorkflowGraph(
        nodes={"start_node": StartNode(edge_order=["e1"]), "end": TerminalNode()},
        edges={
            "e1": CompiledEdge(id="e1", source="start_node", target="ghost"),
            "e2": CompiledEdge(id="e2", source="phantom", target="end"),
        },
    )

    result = validate_workflow(wf)

    assert not result.valid
    assert "Edge e1 targets non-existent node ghost" in result.errors
    assert "Edge e2 has non-existent source phantom" in result.errors


def test_unreachable_and_dead_end_nodes_are_warnings() -> None:
    result = compile_flow(
        [
            {"id": "m1", "type": "message", "config": {"message": "Hello"}},
            {"id": "m2", "type": "message", "config": {"message": "Never reached"}},
        ],
        [],
    )

    assert result.validation.valid
    assert "Node m2 is not reachable from start" in result.validation.warnings
    assert "Node m1 has no outgoing edges and is not an end or transfer node" in result.validation.warnings


def test_validation_result_to_dict() -> None:
    wf = WorkflowGraph(
        nodes={"start_node": StartNode(edge_order=["e"]), "a": ScriptedSpeechNode()},
        edges={"e": CompiledEdge(id="e", source="start_node", target="a")},
    )

    out = validate_workflow(wf).to_dict()

    assert out["valid"] is True
    assert out["errors"] == []


def test_compiled_edge_to_unknown_node_is_reported() -> None:
    result = compile_flow(
        [{"id": "m1", "type": "message", "config": {"message": "Hello"}}],
        [{"id": "e1", "source": "m1", "target": "ghost"}],
    )

    assert "edge_m1_to_ghost_1" in result.workflow.edges
    assert result.workflow.nodes["m1"].edge_order == ["edge_m1_to_ghost_1"]
    assert not result.validation.valid
    assert "Edge edge_m1_to_ghost_1 targets non-existent node ghost" in result.validation.errors


def test_edge_into_start_node_is_not_reported() -> None:
    result = compile_flow(
        [
            {"id": "s", "type": "start"},
            {"id": "m1", "type": "message", "config": {"message": "Hello"}},
            {"id": "bye", "type": "end"},
        ],
        [
            {"id": "e1", "source": "s", "target": "m1"},
            {"id": "e2", "source": "m1", "target": "bye"},
            {"id": "e3", "source": "bye", "target": "s"},
        ],
    )

    assert result.validation.valid
    assert sorted(result.workflow.edges) == ["edge_m1_to_bye_1", "edge_start_node_to_m1_2"]
