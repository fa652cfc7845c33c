"""Feature Analyzer: a read-only scan for nodes that need external tools.

Each metadata entry is tagged with the provisioning phase it belongs to:
custom webhooks can be registered when the agent is created (`PHASE_1`);
appointment, form and play-audio tools embed the agent id in their URL and
must wait until it exists (`PHASE_2`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from ..core.config import CompilerConfig
from ..flow.configs import AppointmentConfig, FormConfig, PlayAudioConfig, WebhookConfig, parse_node_config
from ..flow.forms import FormFieldDefinition
from ..flow.models import FlowNode, NodeKind
from ..logging import get_logger
from ..workflow.models import TransferNode, WorkflowGraph

logger = get_logger(__name__)


class ProvisioningPhase(str, Enum):
    PHASE_1 = "phase_1"
    PHASE_2 = "phase_2"


@dataclass(frozen=True)
class AppointmentNodeInfo:
    node_id: str
    service_name: str
    duration: int
    phase: ProvisioningPhase = ProvisioningPhase.PHASE_2


@dataclass(frozen=True)
class FormNodeInfo:
    node_id: str
    form_id: str
    form_name: str
    fields: List[FormFieldDefinition] = field(default_factory=list)
    phase: ProvisioningPhase = ProvisioningPhase.PHASE_2


@dataclass(frozen=True)
class WebhookNodeInfo:
    node_id: str
    tool_id: str
    url: str
    method: str = "POST"
    headers: Optional[Dict[str, str]] = None
    payload: Optional[Dict[str, Any]] = None
    description: Optional[str] = None
    phase: ProvisioningPhase = ProvisioningPhase.PHASE_1


@dataclass(frozen=True)
class PlayAudioNodeInfo:
    node_id: str
    audio_url: str
    audio_file_name: str = "audio"
    interruptible: bool = False
    wait_for_complete: bool = True
    phase: ProvisioningPhase = ProvisioningPhase.PHASE_2


@dataclass
class FeatureReport:
    has_transfer_nodes: bool = False
    appointment_nodes: List[AppointmentNodeInfo] = field(default_factory=list)
    form_nodes: List[FormNodeInfo] = field(default_factory=list)
    webhook_nodes: List[WebhookNodeInfo] = field(default_factory=list)
    play_audio_nodes: List[PlayAudioNodeInfo] = field(default_factory=list)
    tool_ids: List[str] = field(default_factory=list)

    @property
    def has_appointment_nodes(self) -> bool:
        return bool(self.appointment_nodes)

    @property
    def has_form_nodes(self) -> bool:
        return bool(self.form_nodes)

    @property
    def has_webhook_nodes(self) -> bool:
        return bool(self.webhook_nodes)

    @property
    def has_play_audio_nodes(self) -> bool:
        return bool(self.play_audio_nodes)

    def entries_for_phase(self, phase: ProvisioningPhase) -> List[Any]:
        entries: List[Any] = [
            *self.webhook_nodes,
            *self.appointment_nodes,
            *self.form_nodes,
            *self.play_audio_nodes,
        ]
        return [e for e in entries if e.phase is phase]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hasTransferNodes": self.has_transfer_nodes,
            "hasAppointmentNodes": self.has_appointment_nodes,
            "hasFormNodes": self.has_form_nodes,
            "hasWebhookNodes": self.has_webhook_nodes,
            "hasPlayAudioNodes": self.has_play_audio_nodes,
            "formNodes": [
                {"formId": f.form_id, "formName": f.form_name, "fields": [x.to_dict() for x in f.fields]}
                for f in self.form_nodes
            ],
            "webhookNodes": [
                {
                    "toolId": w.tool_id,
                    "url": w.url,
                    "method": w.method,
                    "headers": w.headers,
                    "payload": w.payload,
                }
                for w in self.webhook_nodes
            ],
            "playAudioNodes": [
                {
                    "nodeId": p.node_id,
                    "audioUrl": p.audio_url,
                    "audioFileName": p.audio_file_name,
                    "interruptible": p.interruptible,
                    "waitForComplete": p.wait_for_complete,
                }
                for p in self.play_audio_nodes
            ],
            "toolIds": list(self.tool_ids),
        }


def analyze_features(
    nodes: Sequence[FlowNode],
    workflow: WorkflowGraph,
    config: Optional[CompilerConfig] = None,
) -> FeatureReport:
    """Classify nodes needing external tools; neither input is modified."""
    report = FeatureReport()
    report.has_transfer_nodes = any(isinstance(n, TransferNode) for n in workflow.nodes.values())

    for node in nodes:
        kind = node.kind
        if kind is NodeKind.APPOINTMENT:
            c = parse_node_config(node, config)
            if isinstance(c, AppointmentConfig):
                report.appointment_nodes.append(
                    AppointmentNodeInfo(node_id=node.id, service_name=c.service_name, duration=c.duration)
                )
        elif kind is NodeKind.FORM:
            c = parse_node_config(node, config)
            if not isinstance(c, FormConfig):
                continue
            if not c.form_id:
                logger.warning("Form node has no form id; no submit tool will be attached", node_id=node.id)
                continue
            report.form_nodes.append(
                FormNodeInfo(node_id=node.id, form_id=c.form_id, form_name=c.form_name, fields=list(c.fields))
            )
        elif kind is NodeKind.WEBHOOK:
            c = parse_node_config(node, config)
            if not isinstance(c, WebhookConfig):
                continue
            if not c.url:
                logger.warning("Webhook node has no URL configured", node_id=node.id, tool_id=c.tool_id)
                continue
            report.webhook_nodes.append(
                WebhookNodeInfo(
                    node_id=node.id,
                    tool_id=c.tool_id,
                    url=c.url,
                    method=c.method,
                    headers=c.headers,
                    payload=c.payload,
                    description=c.description,
                )
            )
        elif kind is NodeKind.PLAY_AUDIO:
            c = parse_node_config(node, config)
            if isinstance(c, PlayAudioConfig):
                report.play_audio_nodes.append(
                    PlayAudioNodeInfo(
                        node_id=node.id,
                        audio_url=c.audio_url,
                        audio_file_name=c.audio_file_name,
                        interruptible=c.interruptible,
                        wait_for_complete=c.wait_for_complete,
                    )
                )

    for _nid, tool_node in workflow.tool_nodes():
        for tid in tool_node.tool_ids:
            if tid not in report.tool_ids:
                report.tool_ids.append(tid)
    return report
