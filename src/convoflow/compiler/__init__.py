"""convoflow.compiler

Flow graph → engine workflow compiler: node compilation, condition elision,
assembly, feature analysis and validation.
"""

from .assembler import GraphAssembler
from .compile import CompileResult, compile_flow
from .conditions import PendingEdge, guard_for_branch, resolve_conditions
from .entry import EntryResolution, resolve_entry
from .features import (
    AppointmentNodeInfo,
    FeatureReport,
    FormNodeInfo,
    PlayAudioNodeInfo,
    ProvisioningPhase,
    WebhookNodeInfo,
    analyze_features,
)
from .nodes import NODE_HANDLERS, compile_node
from .validator import ValidationResult, validate_workflow

__all__ = [
    "AppointmentNodeInfo",
    "CompileResult",
    "EntryResolution",
    "FeatureReport",
    "FormNodeInfo",
    "GraphAssembler",
    "NODE_HANDLERS",
    "PendingEdge",
    "PlayAudioNodeInfo",
    "ProvisioningPhase",
    "ValidationResult",
    "WebhookNodeInfo",
    "analyze_features",
    "compile_flow",
    "compile_node",
    "guard_for_branch",
    "resolve_conditions",
    "resolve_entry",
    "validate_workflow",
]
