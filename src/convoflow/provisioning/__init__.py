"""Two-phase agent provisioning for compiled flows."""

from .provisioner import (
    AgentProvisioningClient,
    FlowAgentProvisioner,
    ProvisioningOutcome,
    WorkflowValidationError,
)

__all__ = [
    "AgentProvisioningClient",
    "FlowAgentProvisioner",
    "ProvisioningOutcome",
    "WorkflowValidationError",
]
