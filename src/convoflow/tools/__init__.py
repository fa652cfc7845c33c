"""External tools: definitions, registry client, handle cache and linker."""

from .cache import ToolHandleCache, get_default_tool_cache
from .definitions import (
    build_appointment_tool,
    build_custom_webhook_tool,
    build_play_audio_tool,
    build_submit_form_tool,
    sanitize_field_id,
)
from .linker import ToolLinker
from .registry import (
    ElevenLabsToolRegistry,
    HttpxRequestSender,
    ToolRegistry,
    ToolRegistryError,
    workspace_key_for_api_key,
)

__all__ = [
    "ElevenLabsToolRegistry",
    "HttpxRequestSender",
    "ToolHandleCache",
    "ToolLinker",
    "ToolRegistry",
    "ToolRegistryError",
    "build_appointment_tool",
    "build_custom_webhook_tool",
    "build_play_audio_tool",
    "build_submit_form_tool",
    "get_default_tool_cache",
    "sanitize_field_id",
    "workspace_key_for_api_key",
]
