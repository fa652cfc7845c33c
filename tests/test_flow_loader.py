from __future__ import annotations

import pytest

from convoflow.flow import FlowFormatError, FlowNode, NodeKind, Position, load_flow_graph, node_kind


pytestmark = pytest.mark.basic


def test_loader_reads_react_flow_shape_and_keeps_extra_data() -> None:
    graph = load_flow_graph(
        [
            {
                "id": "n1",
                "type": "custom",
                "position": {"x": 10, "y": "20"},
                "data": {"config": {"type": "message", "message": "Hi"}, "label": "Greeting"},
            }
        ],
        [],
    )

    node = graph.nodes[0]
    assert node.id == "n1"
    assert node.kind is NodeKind.MESSAGE
    assert node.position == Position(10, 20.0)
    assert node.config == {"type": "message", "message": "Hi"}
    assert node.data == {"label": "Greeting"}


def test_loader_accepts_top_level_config_and_object_form() -> None:
    graph = load_flow_graph(
        {
            "nodes": [{"id": "t1", "type": "transfer", "config": {"phoneNumber": "+15550001111"}}],
            "edges": [{"source": "t1", "target": "t1"}],
        }
    )

    assert graph.nodes[0].kind is NodeKind.TRANSFER
    assert graph.nodes[0].config["phoneNumber"] == "+15550001111"
    assert graph.edges[0].id == "e0"


def test_loader_skips_malformed_entries() -> None:
    graph = load_flow_graph(
        [{"id": ""}, "junk", {"id": "ok", "type": "end"}],
        [{"source": "ok"}, 3, {"id": "x", "source": "ok", "target": "ok", "sourceHandle": "  "}],
    )

    assert [n.id for n in graph.nodes] == ["ok"]
    assert [e.id for e in graph.edges] == ["x"]
    assert graph.edges[0].sourceHandle is None


def test_loader_rejects_non_array_input() -> None:
    with pytest.raises(FlowFormatError):
        load_flow_graph("nodes")
    with pytest.raises(FlowFormatError):
        load_flow_graph([], {"not": "a list"})


def test_node_kind_aliases_and_unknown_fallback() -> None:
    assert node_kind("Transfer_Call") is NodeKind.TRANSFER
    assert node_kind("hangup") is NodeKind.END
    assert node_kind("wait") is NodeKind.DELAY
    assert node_kind("collect_info") is NodeKind.FORM
    assert node_kind("api_call") is NodeKind.WEBHOOK
    assert node_kind("play_audio") is NodeKind.PLAY_AUDIO
    assert node_kind("send_sms") is NodeKind.UNKNOWN
    assert node_kind("") is NodeKind.UNKNOWN


def test_semantic_type_prefers_config_type() -> None:
    assert FlowNode(id="a", type="custom", config={"type": "question"}).semantic_type == "question"
    assert FlowNode(id="b", type="end").semantic_type == "end"
    assert FlowNode(id="c").semantic_type == "unknown"
