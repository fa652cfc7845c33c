"""Two-phase agent provisioning for a compiled flow.

Phase 1 creates the external agent with the workflow, the hoisted first
message and every tool that needs no agent identity. Phase 2 builds the tools
whose webhook URL embeds the returned agent id, links all tools through the
`ToolLinker` and updates the agent.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from ..compiler.compile import CompileResult
from ..compiler.features import (
    AppointmentNodeInfo,
    FormNodeInfo,
    PlayAudioNodeInfo,
    ProvisioningPhase,
    WebhookNodeInfo,
)
from ..core.config import ProvisioningSettings
from ..logging import get_logger
from ..tools.definitions import (
    build_appointment_tool,
    build_custom_webhook_tool,
    build_play_audio_tool,
    build_submit_form_tool,
)
from ..tools.linker import ToolLinker
from ..workflow.models import WorkflowGraph

logger = get_logger(__name__)


class WorkflowValidationError(ValueError):
    """Raised when provisioning is asked to require a valid workflow and it is not."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Workflow validation failed: " + "; ".join(self.errors))


class AgentProvisioningClient(Protocol):
    def create_agent(
        self,
        *,
        workflow: Dict[str, Any],
        first_message: Optional[str],
        tools: List[Dict[str, Any]],
    ) -> str: ...

    def update_agent(self, agent_id: str, *, workflow: Dict[str, Any], tools: List[Dict[str, Any]]) -> None: ...


@dataclass
class ProvisioningOutcome:
    agent_id: str
    tool_handles: Dict[str, str] = field(default_factory=dict)


class FlowAgentProvisioner:
    def __init__(
        self,
        client: AgentProvisioningClient,
        settings: ProvisioningSettings,
        *,
        linker: Optional[ToolLinker] = None,
    ):
        self._client = client
        self._settings = settings
        self._linker = linker

    def phase1_tools(self, result: CompileResult) -> List[Dict[str, Any]]:
        tools: List[Dict[str, Any]] = []
        for entry in result.features.entries_for_phase(ProvisioningPhase.PHASE_1):
            if isinstance(entry, WebhookNodeInfo):
                tools.append(build_custom_webhook_tool(entry))
        return tools

    def phase2_tools(self, agent_id: str, result: CompileResult) -> List[Dict[str, Any]]:
        tools: List[Dict[str, Any]] = []
        appointment_added = False
        for entry in result.features.entries_for_phase(ProvisioningPhase.PHASE_2):
            if isinstance(entry, AppointmentNodeInfo):
                # One booking tool per agent, however many appointment nodes.
                if not appointment_added:
                    tools.append(build_appointment_tool(agent_id, self._settings))
                    appointment_added = True
            elif isinstance(entry, FormNodeInfo):
                tools.append(build_submit_form_tool(entry, agent_id, self._settings))
            elif isinstance(entry, PlayAudioNodeInfo):
                tools.append(build_play_audio_tool(entry, agent_id, self._settings))
        return tools

    def provision_phase1(self, result: CompileResult) -> str:
        """Create the agent; returns the external agent id."""
        tools = self.phase1_tools(result)
        agent_id = self._client.create_agent(
            workflow=result.workflow.to_dict(),
            first_message=result.first_message,
            tools=tools,
        )
        logger.info("Created flow agent", agent_id=agent_id, tools=len(tools))
        return agent_id

    def provision_phase2(self, agent_id: str, result: CompileResult) -> Dict[str, str]:
        """Attach agent-scoped tools and linked tool references.

        Update failures are logged; the agent created in Phase 1 stays usable.
        """
        tools = self.phase1_tools(result) + self.phase2_tools(agent_id, result)
        if not tools:
            return {}

        workflow: WorkflowGraph = result.workflow
        mapping: Dict[str, str] = {}
        if self._linker is not None:
            mapping = self._linker.register_and_rewrite(tools, workflow)

        try:
            self._client.update_agent(agent_id, workflow=workflow.to_dict(), tools=tools)
        except Exception as e:
            logger.error("Failed to attach post-creation tools", agent_id=agent_id, tools=len(tools), error=str(e))
        else:
            logger.info("Attached post-creation tools", agent_id=agent_id, tools=len(tools))
        return mapping

    def provision(self, result: CompileResult, *, require_valid: bool = True) -> ProvisioningOutcome:
        if require_valid and not result.validation.valid:
            raise WorkflowValidationError(result.validation.errors)
        agent_id = self.provision_phase1(result)
        mapping = self.provision_phase2(agent_id, result)
        return ProvisioningOutcome(agent_id=agent_id, tool_handles=mapping)
