from __future__ import annotations

import pytest

from convoflow import compile_flow
from convoflow.compiler import guard_for_branch
from convoflow.compiler.conditions import (
    AGREEMENT,
    NEGATIVE_SENTIMENT,
    NEUTRAL_SENTIMENT,
    POSITIVE_SENTIMENT,
    REFUSAL,
)
from convoflow.flow import BranchRule
from convoflow.flow.configs import ConditionConfig
from convoflow.workflow import UNCONDITIONAL, NaturalLanguageCondition


pytestmark = pytest.mark.basic


def _node(nid: str, ntype: str, **config) -> dict:
    return {"id": nid, "type": "custom", "position": {"x": 0, "y": 0}, "data": {"config": {"type": ntype, **config}}}


def _edge(eid: str, source: str, target: str, handle: str | None = None) -> dict:
    out = {"id": eid, "source": source, "target": target}
    if handle is not None:
        out["sourceHandle"] = handle
    return out


def test_condition_is_replaced_by_guarded_edges_from_its_predecessor() -> None:
    nodes = [
        _node("P", "question", question="Would you like a callback?"),
        _node(
            "C",
            "condition",
            conditions=[
                {"id": "r1", "type": "yes_no", "value": "yes", "targetNodeId": "A"},
                {"id": "r2", "type": "yes_no", "value": "no", "targetNodeId": "B"},
            ],
        ),
        _node("A", "transfer", phoneNumber="+15550001111"),
        _node("B", "end"),
    ]
    edges = [_edge("e1", "P", "C"), _edge("e2", "C", "A", "r1"), _edge("e3", "C", "B", "r2")]

    wf = compile_flow(nodes, edges).workflow

    assert "C" not in wf.nodes
    from_p = wf.outgoing("P")
    assert [(e.target, e.guard) for e in from_p] == [
        ("A", NaturalLanguageCondition(AGREEMENT)),
        ("B", NaturalLanguageCondition(REFUSAL)),
    ]
    assert all(e.source != "C" and e.target != "C" for e in wf.edges.values())
    assert wf.edges[from_p[0].id].to_dict() == {
        "source": "P",
        "target": "A",
        "forward_condition": {"type": "llm", "condition": AGREEMENT},
    }


def test_condition_without_incoming_edge_produces_no_edges() -> None:
    nodes = [_node("C", "condition"), _node("A", "end"), _node("B", "end")]
    edges = [_edge("e1", "C", "A", "true"), _edge("e2", "C", "B", "false")]

    result = compile_flow(nodes, edges)

    assert "C" not in result.workflow.nodes
    assert [e.source for e in result.workflow.edges.values()] == ["start_node"]


def test_every_predecessor_receives_the_branches() -> None:
    nodes = [
        _node("P1", "question", question="First?"),
        _node("P2", "question", question="Second?"),
        _node("C", "condition"),
        _node("A", "end"),
    ]
    edges = [_edge("e1", "P1", "C"), _edge("e2", "P2", "C"), _edge("e3", "C", "A", "true")]

    wf = compile_flow(nodes, edges).workflow

    assert [(e.source, e.target) for e in wf.edges.values() if e.source != "start_node"] == [("P1", "A"), ("P2", "A")]
    assert all(
        e.guard == NaturalLanguageCondition(AGREEMENT) for e in wf.edges.values() if e.source != "start_node"
    )


def test_plain_edges_pass_through_unconditional() -> None:
    nodes = [_node("m1", "message", message="Hi"), _node("q1", "question", question="Name?"), _node("end", "end")]
    edges = [_edge("e1", "m1", "q1", "whatever"), _edge("e2", "q1", "end")]

    wf = compile_flow(nodes, edges).workflow

    assert all(e.guard == UNCONDITIONAL for e in wf.edges.values())


@pytest.mark.parametrize(
    "handle, expected",
    [
        ("true", AGREEMENT),
        ("Yes", AGREEMENT),
        ("FALSE", REFUSAL),
        ("no", REFUSAL),
        ("option_b", 'The user response matches "option_b"'),
    ],
)
def test_handle_guards(handle: str, expected: str) -> None:
    assert guard_for_branch(ConditionConfig(), "T", handle) == NaturalLanguageCondition(expected)


def test_no_rule_and_no_handle_is_unconditional() -> None:
    assert guard_for_branch(ConditionConfig(), "T", None) is UNCONDITIONAL


def test_rule_guards_by_type() -> None:
    config = ConditionConfig(
        rules=[
            BranchRule(id="r1", label="Interested", type="sentiment", value="positive"),
            BranchRule(id="r2", type="sentiment", value="not_interested", target_node_id="N"),
            BranchRule(id="r3", type="keyword", value="billing", target_node_id="K"),
            BranchRule(id="r4", type="keyword", value="x", target_node_id="D", description="Caller asks for a manager"),
        ]
    )

    assert guard_for_branch(config, "ignored", "Interested") == NaturalLanguageCondition(POSITIVE_SENTIMENT)
    assert guard_for_branch(config, "N", None) == NaturalLanguageCondition(NEGATIVE_SENTIMENT)
    assert guard_for_branch(config, "K", "true") == NaturalLanguageCondition(
        'The user response contains or matches "billing"'
    )
    assert guard_for_branch(config, "D", None) == NaturalLanguageCondition("Caller asks for a manager")


def test_rule_without_value_uses_its_label() -> None:
    config = ConditionConfig(
        rules=[
            BranchRule(label="yes", type="yes_no", target_node_id="A"),
            BranchRule(label="No", type="yes_no", target_node_id="B"),
            BranchRule(id="h1", label="billing", type="keyword"),
        ]
    )

    assert guard_for_branch(config, "A", None) == NaturalLanguageCondition(AGREEMENT)
    assert guard_for_branch(config, "B", None) == NaturalLanguageCondition(REFUSAL)
    assert guard_for_branch(config, "other", "h1") == NaturalLanguageCondition(
        'The user response contains or matches "billing"'
    )


def test_unrecognized_yes_no_and_sentiment_values_match_text() -> None:
    config = ConditionConfig(
        rules=[
            BranchRule(type="yes_no", value="maybe", target_node_id="M"),
            BranchRule(type="sentiment", value="curious", target_node_id="S"),
            BranchRule(type="sentiment", value="Neutral", target_node_id="N"),
            BranchRule(id="empty", type="yes_no", target_node_id="E"),
        ]
    )

    assert guard_for_branch(config, "M", None) == NaturalLanguageCondition(
        'The user response contains or matches "maybe"'
    )
    assert guard_for_branch(config, "S", None) == NaturalLanguageCondition(
        'The user response contains or matches "curious"'
    )
    assert guard_for_branch(config, "N", None) == NaturalLanguageCondition(NEUTRAL_SENTIMENT)
    assert guard_for_branch(config, "E", None) is UNCONDITIONAL
