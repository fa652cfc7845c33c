"""
convoflow

Visual flow graph → voice-engine workflow compiler.

This package provides:
- the flow graph input model (editor JSON → frozen dataclasses)
- the compiler (node compilation, condition elision, assembly, analysis, validation)
- tool definitions and the external tool linker
- two-phase agent provisioning (create, then attach agent-scoped tools)

Talking to the engine's agent API is left to an `AgentProvisioningClient` supplied by the host.
"""

from .compiler import CompileResult, FeatureReport, ProvisioningPhase, ValidationResult, compile_flow, validate_workflow
from .core.config import CompilerConfig, ConfigurationError, ProvisioningSettings, validate_webhook_token
from .flow import (
    EmptyFlowError,
    FlowEdge,
    FlowFormatError,
    FlowGraph,
    FlowNode,
    FormDefinition,
    FormFieldDefinition,
    FormStore,
    InMemoryFormStore,
    NodeKind,
    load_flow_graph,
)
from .logging import configure_logging, get_logger
from .provisioning import AgentProvisioningClient, FlowAgentProvisioner, ProvisioningOutcome, WorkflowValidationError
from .tools import ElevenLabsToolRegistry, ToolHandleCache, ToolLinker, ToolRegistry, ToolRegistryError
from .workflow import WorkflowGraph

__all__ = [
    # Compiler
    "compile_flow",
    "validate_workflow",
    "CompileResult",
    "FeatureReport",
    "ProvisioningPhase",
    "ValidationResult",
    # Input model
    "load_flow_graph",
    "FlowGraph",
    "FlowNode",
    "FlowEdge",
    "NodeKind",
    "FormDefinition",
    "FormFieldDefinition",
    "FormStore",
    "InMemoryFormStore",
    # Output model
    "WorkflowGraph",
    # Config
    "CompilerConfig",
    "ProvisioningSettings",
    "validate_webhook_token",
    # Tools + provisioning
    "ElevenLabsToolRegistry",
    "ToolHandleCache",
    "ToolLinker",
    "ToolRegistry",
    "FlowAgentProvisioner",
    "AgentProvisioningClient",
    "ProvisioningOutcome",
    # Errors
    "ConfigurationError",
    "EmptyFlowError",
    "FlowFormatError",
    "ToolRegistryError",
    "WorkflowValidationError",
    # Logging
    "configure_logging",
    "get_logger",
]
