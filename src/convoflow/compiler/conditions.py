"""Condition Resolver: elide condition nodes and push their semantics onto edges.

For every edge `cond -> target` whose source is a condition node, each known
incoming edge `pred -> cond` yields a direct edge `pred -> target` guarded by a
natural-language condition derived from the branch rules or the edge handle.

A condition with no incoming edge yields no edges. Chained conditions
(`cond1 -> cond2`) are not followed: such a predecessor is dropped as well.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from ..core.config import CompilerConfig
from ..flow.configs import BranchRule, ConditionConfig, parse_node_config
from ..flow.models import FlowEdge, FlowGraph, NodeKind
from ..logging import get_logger
from ..workflow.models import UNCONDITIONAL, Guard, NaturalLanguageCondition

logger = get_logger(__name__)

AGREEMENT = 'The user indicates agreement, affirmation, or "yes"'
REFUSAL = 'The user indicates disagreement, refusal, or "no"'
POSITIVE_SENTIMENT = "The user response has a positive sentiment or shows interest"
NEGATIVE_SENTIMENT = "The user response has a negative sentiment or shows disinterest"
NEUTRAL_SENTIMENT = "The user response has a neutral sentiment"

_YES = ("true", "yes")
_NO = ("false", "no")
_SKIPPED_SOURCES = (NodeKind.START, NodeKind.TRIGGER)


@dataclass(frozen=True)
class PendingEdge:
    """An edge ready for the assembler; ids are allocated there."""

    source: str
    target: str
    guard: Guard = UNCONDITIONAL


def _match_rule(rules: List[BranchRule], target: str, handle: Optional[str]) -> Optional[BranchRule]:
    for r in rules:
        if r.target_node_id is not None and r.target_node_id == target:
            return r
    if handle:
        for r in rules:
            if handle in (r.id, r.label):
                return r
    return None


def _rule_text(rule: BranchRule) -> Optional[str]:
    if rule.description:
        return rule.description
    value = (rule.value or rule.label or "").strip()
    key = value.lower()
    if rule.type == "yes_no":
        if key in _YES:
            return AGREEMENT
        if key in _NO:
            return REFUSAL
    elif rule.type == "sentiment":
        if key in ("positive", "interested"):
            return POSITIVE_SENTIMENT
        if key in ("negative", "not_interested"):
            return NEGATIVE_SENTIMENT
        if key == "neutral":
            return NEUTRAL_SENTIMENT
    if value:
        return f'The user response contains or matches "{value}"'
    return None


def guard_for_branch(config: ConditionConfig, target: str, handle: Optional[str]) -> Guard:
    """Guard for `cond -> target`, by rule, then handle keyword, then raw handle."""
    rule = _match_rule(config.rules, target, handle)
    if rule is not None:
        text = _rule_text(rule)
        if text:
            return NaturalLanguageCondition(text)

    if handle:
        h = handle.strip().lower()
        if h in _YES:
            return NaturalLanguageCondition(AGREEMENT)
        if h in _NO:
            return NaturalLanguageCondition(REFUSAL)
        return NaturalLanguageCondition(f'The user response matches "{handle}"')

    return UNCONDITIONAL


def resolve_conditions(graph: FlowGraph, config: Optional[CompilerConfig] = None) -> List[PendingEdge]:
    """Rewrite the flow's edges into direct, guarded edges (in edge-list order)."""
    kinds: Dict[str, NodeKind] = {n.id: n.kind for n in graph.nodes}
    condition_configs: Dict[str, ConditionConfig] = {}
    for n in graph.nodes:
        if n.kind is NodeKind.CONDITION:
            c = parse_node_config(n, config)
            condition_configs[n.id] = c if isinstance(c, ConditionConfig) else ConditionConfig()

    incoming: Dict[str, List[FlowEdge]] = {cid: [] for cid in condition_configs}
    for e in graph.edges:
        if e.target in incoming:
            incoming[e.target].append(e)

    out: List[PendingEdge] = []
    for e in graph.edges:
        if kinds.get(e.source) in _SKIPPED_SOURCES:
            continue

        if e.source in condition_configs:
            preds = [
                p for p in incoming[e.source]
                if kinds.get(p.source) not in _SKIPPED_SOURCES and p.source not in condition_configs
            ]
            if not preds:
                logger.debug("Dropping branch of condition without a usable incoming edge", condition=e.source, target=e.target)
                continue
            if e.target in condition_configs:
                logger.warning("Chained condition nodes are not supported; dropping branch", condition=e.source, target=e.target)
                continue
            guard = guard_for_branch(condition_configs[e.source], e.target, e.sourceHandle)
            for p in preds:
                out.append(PendingEdge(source=p.source, target=e.target, guard=guard))
            continue

        if e.target in condition_configs:
            # Consumed when the condition's outgoing edges are rewritten.
            continue
        if kinds.get(e.target) in _SKIPPED_SOURCES:
            logger.debug("Dropping edge into a start node", source=e.source, target=e.target)
            continue

        out.append(PendingEdge(source=e.source, target=e.target))
    return out
