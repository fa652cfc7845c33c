"""Engine-facing workflow graph model."""

from .models import (
    UNCONDITIONAL,
    CompiledEdge,
    CompiledNode,
    ExternalToolInvocationNode,
    GenericInstructionNode,
    Guard,
    NaturalLanguageCondition,
    ResultCondition,
    ScriptedSpeechNode,
    StartNode,
    TerminalNode,
    TransferNode,
    Unconditional,
    WorkflowGraph,
)

__all__ = [
    "UNCONDITIONAL",
    "CompiledEdge",
    "CompiledNode",
    "ExternalToolInvocationNode",
    "GenericInstructionNode",
    "Guard",
    "NaturalLanguageCondition",
    "ResultCondition",
    "ScriptedSpeechNode",
    "StartNode",
    "TerminalNode",
    "TransferNode",
    "Unconditional",
    "WorkflowGraph",
]
