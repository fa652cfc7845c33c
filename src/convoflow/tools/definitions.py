"""External tool definitions attached to a provisioned agent.

Each builder returns the JSON config the external engine expects for a
`webhook` tool. Custom webhooks need nothing but the node config; appointment,
form and play-audio tools embed the external agent id in their URL and can
only be built once it exists.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Sequence

from ..core.config import ProvisioningSettings
from ..core.naming import book_appointment_tool_name, play_audio_tool_name, submit_form_tool_name
from ..compiler.features import FormNodeInfo, PlayAudioNodeInfo, WebhookNodeInfo
from ..flow.forms import FormFieldDefinition
from ..logging import get_logger, mask_webhook_url

logger = get_logger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}

_CALLER_PHONE_DESCRIPTION = (
    "The phone number exactly as spoken by the caller. Accept any format - with or without "
    "country code, spaces, dashes, or parentheses. Do NOT ask the caller to repeat or reformat their number."
)

_UNIVERSAL_PROPERTIES: Dict[str, Dict[str, str]] = {
    "caller_phone": {
        "type": "string",
        "description": (
            "The phone number of the caller. This is the number that initiated or received the call. "
            "Include country code if known. ALWAYS populate this field."
        ),
    },
    "caller_name": {
        "type": "string",
        "description": "The name of the caller if collected during the conversation.",
    },
    "conversation_id": {
        "type": "string",
        "description": "The unique conversation ID for this call session. You have access to this from the conversation context.",
    },
    "call_sid": {
        "type": "string",
        "description": "The telephony Call SID if this is a phone call. Available from the call context.",
    },
    "timestamp": {
        "type": "string",
        "description": "The current timestamp in ISO 8601 format (e.g., 2024-01-15T14:30:00Z). Generate this at the time of webhook execution.",
    },
    "conversation_summary": {
        "type": "string",
        "description": "A brief summary of the entire conversation, including what was discussed and any decisions made.",
    },
    "collected_data": {
        "type": "object",
        "description": (
            "All data collected during the conversation. Include EVERY piece of information the user provided: "
            "answers to questions, form field values, appointment details, preferences, contact info, etc. "
            "Use descriptive keys like 'product_name', 'quantity', 'delivery_address', 'email', 'preferred_date'."
        ),
    },
}


def _json_type(value: Any) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    return "string"


def build_custom_webhook_tool(info: WebhookNodeInfo) -> Dict[str, Any]:
    """Universal webhook tool for a flow webhook node.

    The engine only supports GET and POST; other methods are sent as POST.
    GET tools carry no request body schema.
    """
    method = "GET" if info.method == "GET" else "POST"
    headers = dict(info.headers) if info.headers else dict(JSON_HEADERS)

    if method == "GET":
        return {
            "type": "webhook",
            "name": info.tool_id,
            "description": info.description or f"Send a GET request to fetch data from {info.url}",
            "api_schema": {"url": info.url, "method": method, "request_headers": headers},
        }

    custom: Dict[str, Dict[str, str]] = {}
    for key, value in (info.payload or {}).items():
        custom[str(key)] = {
            "type": _json_type(value),
            "description": f"Custom field: {key}. Default value: {json.dumps(value)}",
        }

    description = info.description
    if not description:
        description = (
            "Send collected conversation data to the webhook endpoint. "
            "ALWAYS include: the caller's phone number (caller_phone), conversation_id, call_sid if available, timestamp, "
            "a summary of the conversation, and ALL data collected during the call in the collected_data object."
        )
        if custom:
            description += f"\n\nCustom fields to include: {', '.join(custom)}"

    return {
        "type": "webhook",
        "name": info.tool_id,
        "description": description,
        "api_schema": {
            "url": info.url,
            "method": method,
            "request_headers": headers,
            "request_body_schema": {
                "type": "object",
                "properties": {**_UNIVERSAL_PROPERTIES, **custom},
                "required": ["caller_phone", "collected_data"],
            },
        },
    }


def build_appointment_tool(agent_id: str, settings: ProvisioningSettings) -> Dict[str, Any]:
    url = f"{settings.public_domain}/api/webhooks/elevenlabs/appointment/{settings.appointment_webhook_secret}/{agent_id}"
    name = book_appointment_tool_name(agent_id)
    logger.debug("Built appointment tool", tool=name, url=mask_webhook_url(url))
    return {
        "type": "webhook",
        "name": name,
        "description": (
            "Book an appointment for the caller. Use this tool when the caller wants to schedule an appointment. "
            "Collect the date, time, and their contact information before calling this tool."
        ),
        "api_schema": {
            "url": url,
            "method": "POST",
            "request_headers": dict(JSON_HEADERS),
            "request_body_schema": {
                "type": "object",
                "properties": {
                    "contactName": {"type": "string", "description": "The name of the person booking the appointment"},
                    "contactPhone": {"type": "string", "description": _CALLER_PHONE_DESCRIPTION},
                    "contactEmail": {"type": "string", "description": "Optional email address of the person"},
                    "appointmentDate": {
                        "type": "string",
                        "description": (
                            "The appointment date. Can be relative like 'tomorrow', 'next Monday', 'in 3 days' "
                            "OR in YYYY-MM-DD format."
                        ),
                    },
                    "appointmentTime": {
                        "type": "string",
                        "description": (
                            "The appointment time in HH:MM format (24-hour). "
                            "Convert spoken times: '2pm' becomes '14:00', '9:30am' becomes '09:30'"
                        ),
                    },
                    "duration": {"type": "number", "description": "Duration in minutes (default 30)"},
                    "serviceName": {"type": "string", "description": "Optional name of the service/reason for appointment"},
                    "notes": {"type": "string", "description": "Optional additional notes about the appointment"},
                },
                "required": ["contactName", "contactPhone", "appointmentDate", "appointmentTime"],
            },
        },
    }


def sanitize_field_id(field_id: str) -> str:
    """Make a form field id safe as a tool parameter name (`[A-Za-z0-9_.@]`)."""
    s = str(field_id).replace("-", "_")
    s = re.sub(r"[^a-zA-Z0-9_.@]", "_", s)
    s = re.sub(r"\.{2,}", ".", s)
    return re.sub(r"_{2,}", "_", s)


def _field_property(field: FormFieldDefinition) -> Dict[str, str]:
    q = field.question
    t = field.field_type
    if t == "number":
        return {"type": "number", "description": f'Numeric answer to: "{q}"'}
    if t == "yes_no":
        return {"type": "boolean", "description": f'Yes/No answer to: "{q}" (true = yes, false = no)'}
    if t == "multiple_choice":
        options = f". Options: {', '.join(field.options)}" if field.options else ""
        return {"type": "string", "description": f'Choice for: "{q}"{options}'}
    if t == "email":
        return {"type": "string", "description": f'Email address for: "{q}"'}
    if t == "phone":
        return {"type": "string", "description": f'Phone number for: "{q}". Accept any format.'}
    if t == "date":
        return {
            "type": "string",
            "description": f"Date for: \"{q}\". Can be natural language like 'tomorrow' or formatted date.",
        }
    if t == "rating":
        return {"type": "number", "description": f'Rating (1-5 or 1-10) for: "{q}"'}
    return {"type": "string", "description": f'Answer to: "{q}"'}


def _form_schema(fields: Sequence[FormFieldDefinition]) -> Dict[str, Any]:
    properties: Dict[str, Any] = {
        "contactName": {"type": "string", "description": "The name of the person filling the form"},
        "contactPhone": {"type": "string", "description": _CALLER_PHONE_DESCRIPTION},
    }
    required: List[str] = ["contactName", "contactPhone"]
    for f in fields:
        key = f"field_{sanitize_field_id(f.id)}"
        properties[key] = _field_property(f)
        if f.is_required:
            required.append(key)
    return {"type": "object", "properties": properties, "required": required}


def build_submit_form_tool(info: FormNodeInfo, agent_id: str, settings: ProvisioningSettings) -> Dict[str, Any]:
    url = f"{settings.public_domain}/api/webhooks/elevenlabs/form/{settings.form_webhook_secret}/{info.form_id}/{agent_id}"
    name = submit_form_tool_name(info.form_id)
    fields = sorted(info.fields, key=lambda f: f.order)
    listing = "\n".join(
        f'{i}. "{f.question}" ({f.field_type}{", required" if f.is_required else ""})'
        for i, f in enumerate(fields, start=1)
    )
    logger.debug("Built form tool", tool=name, form=info.form_name, fields=len(fields), url=mask_webhook_url(url))
    return {
        "type": "webhook",
        "name": name,
        "description": (
            f'Submit the "{info.form_name}" form. Collect the following information from the caller before using this tool:\n'
            f"{listing}\n\nOnce all required fields are collected, call this tool to save the form submission."
        ),
        "api_schema": {
            "url": url,
            "method": "POST",
            "request_headers": dict(JSON_HEADERS),
            "request_body_schema": _form_schema(fields),
        },
    }


def build_play_audio_tool(info: PlayAudioNodeInfo, agent_id: str, settings: ProvisioningSettings) -> Dict[str, Any]:
    url = f"{settings.public_domain}/api/elevenlabs/tools/play-audio/{agent_id}"
    return {
        "type": "webhook",
        "name": play_audio_tool_name(info.node_id),
        "description": f'Play the audio file "{info.audio_file_name}". Call this tool to play the audio during the conversation.',
        "api_schema": {
            "url": url,
            "method": "POST",
            "request_headers": dict(JSON_HEADERS),
            "request_body_schema": {
                "type": "object",
                "properties": {
                    "audioUrl": {"type": "string", "description": "The URL of the audio file to play", "const": info.audio_url},
                    "interruptible": {
                        "type": "boolean",
                        "description": "Whether the audio can be interrupted",
                        "const": info.interruptible,
                    },
                    "waitForComplete": {
                        "type": "boolean",
                        "description": "Whether to wait for audio to complete",
                        "const": info.wait_for_complete,
                    },
                },
                "required": ["audioUrl"],
            },
        },
    }
