"""Per-kind node configuration parsed from the editor's open `config` map.

The editor stores config as free-form JSON. Each node kind gets a small frozen
dataclass with explicit optional fields; `parse_node_config()` reads the known
keys (including legacy/template spellings) and falls back to defaults for
missing or malformed values. Parsing never raises: a bad value is logged and
replaced by its default so a single misconfigured node cannot abort a compile.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from ..core.config import CompilerConfig
from ..core.naming import webhook_tool_name
from ..logging import get_logger
from .forms import FormFieldDefinition, parse_form_fields
from .models import FlowNode, NodeKind

logger = get_logger(__name__)

TRANSFER_TYPES = ("conference", "blind")
WEBHOOK_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")


@dataclass(frozen=True)
class EmptyConfig:
    """Config for kinds that carry no payload (start/trigger/end)."""

    label: Optional[str] = None


@dataclass(frozen=True)
class MessageConfig:
    message: str
    label: Optional[str] = None
    has_text: bool = True


@dataclass(frozen=True)
class QuestionConfig:
    question: str
    variable_name: str
    label: Optional[str] = None


@dataclass(frozen=True)
class TransferConfig:
    phone_number: str
    transfer_type: str
    label: Optional[str] = None


@dataclass(frozen=True)
class DelayConfig:
    message: str
    label: Optional[str] = None


@dataclass(frozen=True)
class AppointmentConfig:
    message: str
    service_name: str
    duration: int
    label: Optional[str] = None


@dataclass(frozen=True)
class FormConfig:
    message: str
    form_id: Optional[str] = None
    form_name: str = "Data Collection"
    fields: List[FormFieldDefinition] = field(default_factory=list)
    label: Optional[str] = None


@dataclass(frozen=True)
class WebhookConfig:
    tool_id: str
    url: str = ""
    method: str = "POST"
    headers: Optional[Dict[str, str]] = None
    payload: Optional[Dict[str, Any]] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class PlayAudioConfig:
    audio_url: str = ""
    audio_file_name: str = "audio"
    interruptible: bool = False
    wait_for_complete: bool = True


@dataclass(frozen=True)
class BranchRule:
    id: Optional[str] = None
    label: Optional[str] = None
    type: str = "keyword"
    value: str = ""
    target_node_id: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class ConditionConfig:
    rules: List[BranchRule] = field(default_factory=list)


@dataclass(frozen=True)
class GenericConfig:
    label: str
    message: Optional[str] = None


NodeConfig = Union[
    EmptyConfig,
    MessageConfig,
    QuestionConfig,
    TransferConfig,
    DelayConfig,
    AppointmentConfig,
    FormConfig,
    WebhookConfig,
    PlayAudioConfig,
    ConditionConfig,
    GenericConfig,
]


def _text(config: Mapping[str, Any], *keys: str) -> Optional[str]:
    for k in keys:
        v = config.get(k)
        if isinstance(v, str) and v:
            return v
    return None


def _bool(node_id: str, config: Mapping[str, Any], key: str, default: bool) -> bool:
    v = config.get(key)
    if v is None:
        return default
    if isinstance(v, bool):
        return v
    logger.warning("Ignoring non-boolean node setting", node_id=node_id, key=key, value=repr(v))
    return default


def _label(config: Mapping[str, Any]) -> Optional[str]:
    return _text(config, "label", "name")


def _parse_message(node: FlowNode, cfg: CompilerConfig) -> MessageConfig:
    text = _text(node.config, "message")
    return MessageConfig(
        message=text if text is not None else cfg.default_message,
        label=_label(node.config),
        has_text=text is not None,
    )


def _parse_question(node: FlowNode, cfg: CompilerConfig) -> QuestionConfig:
    return QuestionConfig(
        question=_text(node.config, "question", "message") or cfg.default_question,
        variable_name=_text(node.config, "variableName", "variable") or cfg.default_response_variable,
        label=_label(node.config),
    )


def _parse_transfer(node: FlowNode, cfg: CompilerConfig) -> TransferConfig:
    transfer_type = node.config.get("transferType")
    if transfer_type is None:
        transfer_type = cfg.default_transfer_type
    elif transfer_type not in TRANSFER_TYPES:
        logger.warning(
            "Unknown transfer type; using default",
            node_id=node.id,
            transfer_type=repr(transfer_type),
            default=cfg.default_transfer_type,
        )
        transfer_type = cfg.default_transfer_type
    return TransferConfig(
        phone_number=_text(node.config, "phoneNumber", "transferNumber", "number") or "",
        transfer_type=str(transfer_type),
        label=_label(node.config),
    )


def _parse_delay(node: FlowNode, cfg: CompilerConfig) -> DelayConfig:
    return DelayConfig(
        message=_text(node.config, "message", "waitMessage") or cfg.default_delay_message,
        label=_label(node.config),
    )


def _parse_duration(node: FlowNode, cfg: CompilerConfig) -> int:
    raw = node.config.get("duration")
    if raw is None or raw == "":
        return cfg.default_appointment_duration
    try:
        value = int(raw)
    except (TypeError, ValueError):
        value = 0
    if isinstance(raw, bool) or value <= 0:
        logger.warning("Invalid appointment duration; using default", node_id=node.id, duration=repr(raw))
        return cfg.default_appointment_duration
    return value


def _parse_appointment(node: FlowNode, cfg: CompilerConfig) -> AppointmentConfig:
    return AppointmentConfig(
        message=_text(node.config, "message", "introMessage", "confirmMessage")
        or "I can help you schedule an appointment. What date and time works best for you?",
        service_name=_text(node.config, "serviceName", "service") or "appointment",
        duration=_parse_duration(node, cfg),
        label=_label(node.config),
    )


def _parse_form(node: FlowNode, cfg: CompilerConfig) -> FormConfig:
    return FormConfig(
        message=_text(node.config, "message", "introMessage") or "I need to collect some information from you.",
        form_id=_text(node.config, "formId"),
        form_name=_text(node.config, "formName") or "Data Collection",
        fields=parse_form_fields(node.config.get("fields")),
        label=_label(node.config),
    )


def _parse_webhook(node: FlowNode, cfg: CompilerConfig) -> WebhookConfig:
    # Templates may keep webhook settings on `data` instead of `data.config`.
    config, data = node.config, node.data
    tool_id = (
        _text(config, "toolId", "tool_id", "name")
        or _text(data, "toolId", "tool_id")
        or webhook_tool_name(node.id)
    )
    method_raw = _text(config, "method") or _text(data, "method") or "POST"
    method = method_raw.upper()
    if method not in WEBHOOK_METHODS:
        logger.warning("Unknown webhook method; using POST", node_id=node.id, method=method_raw)
        method = "POST"
    headers = config.get("headers", data.get("headers"))
    payload = config.get("payload", data.get("payload"))
    return WebhookConfig(
        tool_id=tool_id,
        url=_text(config, "url", "webhookUrl") or _text(data, "url", "webhookUrl") or "",
        method=method,
        headers={str(k): str(v) for k, v in headers.items()} if isinstance(headers, dict) else None,
        payload=dict(payload) if isinstance(payload, dict) else None,
        description=_text(config, "description"),
    )


def _parse_play_audio(node: FlowNode, cfg: CompilerConfig) -> PlayAudioConfig:
    return PlayAudioConfig(
        audio_url=_text(node.config, "audioUrl") or "",
        audio_file_name=_text(node.config, "audioFileName") or "audio",
        interruptible=_bool(node.id, node.config, "interruptible", False),
        wait_for_complete=_bool(node.id, node.config, "waitForComplete", True),
    )


def _parse_rule(raw: Any) -> Optional[BranchRule]:
    if not isinstance(raw, dict):
        return None
    value = raw.get("value")
    label = raw.get("label")
    return BranchRule(
        id=str(raw["id"]) if raw.get("id") is not None else None,
        label=str(label) if label is not None else None,
        type=str(raw.get("type") or "keyword"),
        value=str(value) if value is not None else "",
        target_node_id=str(raw["targetNodeId"]) if raw.get("targetNodeId") is not None else None,
        description=_text(raw, "description"),
    )


def _parse_condition(node: FlowNode, cfg: CompilerConfig) -> ConditionConfig:
    raw_rules = node.config.get("conditions")
    rules: List[BranchRule] = []
    if isinstance(raw_rules, list):
        for r in raw_rules:
            rule = _parse_rule(r)
            if rule is not None:
                rules.append(rule)
    return ConditionConfig(rules=rules)


def _parse_empty(node: FlowNode, cfg: CompilerConfig) -> EmptyConfig:
    return EmptyConfig(label=_label(node.config))


def _parse_generic(node: FlowNode, cfg: CompilerConfig) -> GenericConfig:
    return GenericConfig(
        label=_text(node.config, "label") or node.semantic_type or "Node",
        message=_text(node.config, "message"),
    )


_PARSERS: Dict[NodeKind, Callable[[FlowNode, CompilerConfig], NodeConfig]] = {
    NodeKind.START: _parse_empty,
    NodeKind.TRIGGER: _parse_empty,
    NodeKind.MESSAGE: _parse_message,
    NodeKind.QUESTION: _parse_question,
    NodeKind.TRANSFER: _parse_transfer,
    NodeKind.END: _parse_empty,
    NodeKind.DELAY: _parse_delay,
    NodeKind.APPOINTMENT: _parse_appointment,
    NodeKind.FORM: _parse_form,
    NodeKind.WEBHOOK: _parse_webhook,
    NodeKind.PLAY_AUDIO: _parse_play_audio,
    NodeKind.CONDITION: _parse_condition,
    NodeKind.UNKNOWN: _parse_generic,
}


def parse_node_config(node: FlowNode, config: Optional[CompilerConfig] = None) -> NodeConfig:
    return _PARSERS[node.kind](node, config or CompilerConfig())
