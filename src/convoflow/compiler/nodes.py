"""Node Compiler: one flow node → one compiled workflow node (or elided).

Dispatch is a table keyed by the closed `NodeKind` enum; `NodeKind.UNKNOWN`
is the catch-all so unrecognized editor types still compile.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from ..core.config import CompilerConfig
from ..core.naming import play_audio_tool_name, submit_form_tool_name
from ..flow.configs import (
    AppointmentConfig,
    DelayConfig,
    FormConfig,
    GenericConfig,
    MessageConfig,
    PlayAudioConfig,
    QuestionConfig,
    TransferConfig,
    WebhookConfig,
    parse_node_config,
)
from ..flow.models import FlowNode, NodeKind
from ..logging import get_logger
from ..workflow.models import (
    CompiledNode,
    ExternalToolInvocationNode,
    GenericInstructionNode,
    ScriptedSpeechNode,
    TerminalNode,
    TransferNode,
)
from . import prompts

logger = get_logger(__name__)

NodeHandler = Callable[[FlowNode, Any, bool, CompilerConfig], Optional[CompiledNode]]


def _elide(node: FlowNode, c: Any, is_entry: bool, cfg: CompilerConfig) -> Optional[CompiledNode]:
    return None


def _message(node: FlowNode, c: MessageConfig, is_entry: bool, cfg: CompilerConfig) -> CompiledNode:
    # The entry message text is sent through the engine's first-message field.
    if is_entry and c.has_text:
        prompt = prompts.ENTRY_MESSAGE_PROMPT
    else:
        prompt = prompts.verbatim_message_prompt(c.message)
    return ScriptedSpeechNode(
        position=node.position,
        label=c.label or "Message",
        additional_prompt=prompt,
    )


def _question(node: FlowNode, c: QuestionConfig, is_entry: bool, cfg: CompilerConfig) -> CompiledNode:
    return ScriptedSpeechNode(
        position=node.position,
        label=c.label or "Question",
        additional_prompt=prompts.verbatim_question_prompt(c.question, c.variable_name),
        response_variable=c.variable_name,
    )


def _transfer(node: FlowNode, c: TransferConfig, is_entry: bool, cfg: CompilerConfig) -> CompiledNode:
    if not c.phone_number:
        logger.warning("Transfer node has no destination number", node_id=node.id)
    return TransferNode(position=node.position, phone_number=c.phone_number, transfer_type=c.transfer_type)


def _end(node: FlowNode, c: Any, is_entry: bool, cfg: CompilerConfig) -> CompiledNode:
    return TerminalNode(position=node.position)


def _delay(node: FlowNode, c: DelayConfig, is_entry: bool, cfg: CompilerConfig) -> CompiledNode:
    return ScriptedSpeechNode(
        position=node.position,
        label=c.label or "Delay",
        additional_prompt=prompts.delay_prompt(c.message),
    )


def _appointment(node: FlowNode, c: AppointmentConfig, is_entry: bool, cfg: CompilerConfig) -> CompiledNode:
    return ScriptedSpeechNode(
        position=node.position,
        label=c.label or "Appointment",
        additional_prompt=prompts.appointment_prompt(c.message, service_name=c.service_name, duration=c.duration),
    )


def _form(node: FlowNode, c: FormConfig, is_entry: bool, cfg: CompilerConfig) -> CompiledNode:
    return ScriptedSpeechNode(
        position=node.position,
        label=c.label or "Form",
        additional_prompt=prompts.form_collection_prompt(c.message, c.form_name, c.fields),
        additional_tool_ids=[submit_form_tool_name(c.form_id)] if c.form_id else [],
    )


def _webhook(node: FlowNode, c: WebhookConfig, is_entry: bool, cfg: CompilerConfig) -> CompiledNode:
    return ExternalToolInvocationNode(position=node.position, tool_ids=[c.tool_id])


def _play_audio(node: FlowNode, c: PlayAudioConfig, is_entry: bool, cfg: CompilerConfig) -> CompiledNode:
    if not c.audio_url:
        logger.warning("Play audio node has no audio URL", node_id=node.id)
    return ExternalToolInvocationNode(position=node.position, tool_ids=[play_audio_tool_name(node.id)])


def _generic(node: FlowNode, c: GenericConfig, is_entry: bool, cfg: CompilerConfig) -> CompiledNode:
    logger.info("Compiling unrecognized node type as generic instruction", node_id=node.id, type=node.semantic_type)
    return GenericInstructionNode(
        position=node.position,
        label=c.label,
        additional_prompt=c.message or cfg.default_instruction,
    )


NODE_HANDLERS: Dict[NodeKind, NodeHandler] = {
    NodeKind.START: _elide,
    NodeKind.TRIGGER: _elide,
    NodeKind.MESSAGE: _message,
    NodeKind.QUESTION: _question,
    NodeKind.TRANSFER: _transfer,
    NodeKind.END: _end,
    NodeKind.DELAY: _delay,
    NodeKind.APPOINTMENT: _appointment,
    NodeKind.FORM: _form,
    NodeKind.WEBHOOK: _webhook,
    NodeKind.PLAY_AUDIO: _play_audio,
    # Handled entirely by the condition resolver.
    NodeKind.CONDITION: _elide,
    NodeKind.UNKNOWN: _generic,
}

_missing = set(NodeKind) - set(NODE_HANDLERS)
if _missing:
    raise RuntimeError(f"Node compiler has no handler for: {sorted(k.value for k in _missing)}")


def compile_node(
    node: FlowNode,
    *,
    is_entry: bool = False,
    config: Optional[CompilerConfig] = None,
) -> Optional[CompiledNode]:
    """Compile one flow node; returns None for elided kinds (start/trigger/condition)."""
    cfg = config or CompilerConfig()
    return NODE_HANDLERS[node.kind](node, parse_node_config(node, cfg), is_entry, cfg)
