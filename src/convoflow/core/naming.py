"""Tool names shared by the compiler (references) and tool definitions (registrations).

Both sides must produce the same friendly name for the Tool Linker to match them.
"""

from __future__ import annotations


def _suffix(value: str) -> str:
    return str(value or "")[-8:]


def webhook_tool_name(node_id: str) -> str:
    return f"webhook_{node_id}"


def play_audio_tool_name(node_id: str) -> str:
    return f"play_audio_{_suffix(node_id)}"


def submit_form_tool_name(form_id: str) -> str:
    return f"submit_form_{_suffix(form_id)}"


def book_appointment_tool_name(agent_id: str) -> str:
    return f"book_appointment_{_suffix(agent_id)}"
