from __future__ import annotations

import pytest

from convoflow import compile_flow
from convoflow.compiler import resolve_entry
from convoflow.compiler.prompts import ENTRY_MESSAGE_PROMPT
from convoflow.flow import load_flow_graph


pytestmark = pytest.mark.basic


def _node(nid: str, ntype: str, **config) -> dict:
    return {"id": nid, "type": "custom", "position": {"x": 0, "y": 0}, "data": {"config": {"type": ntype, **config}}}


def _edge(eid: str, source: str, target: str, handle: str | None = None) -> dict:
    out = {"id": eid, "source": source, "target": target}
    if handle is not None:
        out["sourceHandle"] = handle
    return out


def test_entry_message_text_is_hoisted_as_first_message() -> None:
    nodes = [_node("m1", "message", message="Hi there"), _node("end", "end")]
    edges = [_edge("e1", "m1", "end")]

    result = compile_flow(nodes, edges)

    assert result.first_message == "Hi there"
    assert result.entry_node_id == "m1"
    entry = result.workflow.nodes["m1"]
    assert entry.additional_prompt == ENTRY_MESSAGE_PROMPT
    assert "Hi there" not in entry.additional_prompt
    assert "VERBATIM" not in entry.additional_prompt


def test_start_node_is_elided_and_entry_follows_its_edge() -> None:
    nodes = [
        _node("q0", "question", question="Unrelated root?"),
        _node("s", "start"),
        _node("m1", "message", message="Welcome to Acme"),
        _node("end", "end"),
    ]
    edges = [_edge("e1", "s", "m1"), _edge("e2", "m1", "end"), _edge("e3", "q0", "end")]

    result = compile_flow(nodes, edges)

    assert "s" not in result.workflow.nodes
    assert result.entry_node_id == "m1"
    assert result.first_message == "Welcome to Acme"
    start_edges = result.workflow.outgoing("start_node")
    assert [e.target for e in start_edges] == ["m1"]
    # Only the synthetic Start edge leaves the start node.
    assert all(e.source != "s" for e in result.workflow.edges.values())


def test_non_message_entry_has_no_first_message() -> None:
    graph = load_flow_graph([_node("q1", "question", question="How can we help?")], [])

    resolution = resolve_entry(graph)

    assert resolution.entry_node_id == "q1"
    assert resolution.first_message is None


def test_root_condition_is_never_the_entry() -> None:
    graph = load_flow_graph(
        [_node("c1", "condition"), _node("m1", "message", message="Hello!")],
        [_edge("e1", "c1", "m1", "yes")],
    )

    assert resolve_entry(graph).entry_node_id == "m1"


def test_cycle_falls_back_to_first_compilable_node() -> None:
    graph = load_flow_graph(
        [_node("c1", "condition"), _node("a", "question", question="A?"), _node("b", "question", question="B?")],
        [_edge("e1", "a", "b"), _edge("e2", "b", "a")],
    )

    assert resolve_entry(graph).entry_node_id == "a"


def test_entry_message_without_text_is_spoken_verbatim() -> None:
    result = compile_flow([_node("m1", "message")], [])

    assert result.first_message is None
    assert "Hello" in result.workflow.nodes["m1"].additional_prompt
    assert "VERBATIM" in result.workflow.nodes["m1"].additional_prompt


def test_empty_graph_resolves_to_nothing() -> None:
    resolution = resolve_entry(load_flow_graph([], []))

    assert resolution.entry_node_id is None
    assert resolution.first_message is None
