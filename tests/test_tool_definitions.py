from __future__ import annotations

import pytest

from convoflow import ProvisioningSettings
from convoflow.compiler import FormNodeInfo, PlayAudioNodeInfo, WebhookNodeInfo
from convoflow.flow import FormFieldDefinition
from convoflow.tools import (
    build_appointment_tool,
    build_custom_webhook_tool,
    build_play_audio_tool,
    build_submit_form_tool,
    sanitize_field_id,
)


pytestmark = pytest.mark.basic

AGENT_ID = "agent_1234567890"


@pytest.fixture
def settings() -> ProvisioningSettings:
    return ProvisioningSettings(
        public_domain="voice.example.com",
        appointment_webhook_secret="a" * 64,
        form_webhook_secret="b" * 64,
    )


def test_appointment_tool_embeds_agent_id(settings: ProvisioningSettings) -> None:
    tool = build_appointment_tool(AGENT_ID, settings)

    assert tool["type"] == "webhook"
    assert tool["name"] == "book_appointment_34567890"
    assert tool["api_schema"]["url"] == (
        f"https://voice.example.com/api/webhooks/elevenlabs/appointment/{'a' * 64}/{AGENT_ID}"
    )
    schema = tool["api_schema"]["request_body_schema"]
    assert schema["required"] == ["contactName", "contactPhone", "appointmentDate", "appointmentTime"]
    assert schema["properties"]["duration"]["type"] == "number"


def test_submit_form_tool_properties_follow_field_types(settings: ProvisioningSettings) -> None:
    info = FormNodeInfo(
        node_id="f1",
        form_id="form-0000abcd1234",
        form_name="Intake",
        fields=[
            FormFieldDefinition(id="email-addr", question="Your email?", field_type="email", is_required=True, order=1),
            FormFieldDefinition(id="q 2", question="Rate us", field_type="rating", order=0),
            FormFieldDefinition(id="opt", question="Newsletter?", field_type="yes_no", order=2),
        ],
    )

    tool = build_submit_form_tool(info, AGENT_ID, settings)

    assert tool["name"] == "submit_form_abcd1234"
    assert tool["api_schema"]["url"].endswith(f"/api/webhooks/elevenlabs/form/{'b' * 64}/form-0000abcd1234/{AGENT_ID}")
    schema = tool["api_schema"]["request_body_schema"]
    assert schema["properties"]["field_email_addr"]["type"] == "string"
    assert schema["properties"]["field_q_2"]["type"] == "number"
    assert schema["properties"]["field_opt"]["type"] == "boolean"
    assert schema["required"] == ["contactName", "contactPhone", "field_email_addr"]
    assert '1. "Rate us" (rating)' in tool["description"]
    assert '2. "Your email?" (email, required)' in tool["description"]


def test_play_audio_tool_pins_playback_settings(settings: ProvisioningSettings) -> None:
    info = PlayAudioNodeInfo(node_id="node-abcdef123456", audio_url="https://cdn.example.com/a.mp3", interruptible=True)

    tool = build_play_audio_tool(info, AGENT_ID, settings)

    assert tool["name"] == "play_audio_ef123456"
    assert tool["api_schema"]["url"] == f"https://voice.example.com/api/elevenlabs/tools/play-audio/{AGENT_ID}"
    props = tool["api_schema"]["request_body_schema"]["properties"]
    assert props["audioUrl"]["const"] == "https://cdn.example.com/a.mp3"
    assert props["interruptible"]["const"] is True
    assert props["waitForComplete"]["const"] is True


def test_custom_webhook_post_carries_universal_schema() -> None:
    info = WebhookNodeInfo(
        node_id="n1",
        tool_id="webhook_n1",
        url="https://hooks.example.com/in",
        method="PUT",
        payload={"priority": 2, "vip": True, "source": "ivr"},
    )

    tool = build_custom_webhook_tool(info)

    api = tool["api_schema"]
    assert api["method"] == "POST"
    assert api["request_headers"] == {"Content-Type": "application/json"}
    props = api["request_body_schema"]["properties"]
    assert {"caller_phone", "conversation_id", "collected_data"} <= set(props)
    assert props["priority"]["type"] == "number"
    assert props["vip"]["type"] == "boolean"
    assert props["source"]["type"] == "string"
    assert api["request_body_schema"]["required"] == ["caller_phone", "collected_data"]
    assert "Custom fields to include: priority, vip, source" in tool["description"]


def test_custom_webhook_get_has_no_body_schema() -> None:
    info = WebhookNodeInfo(
        node_id="n1",
        tool_id="lookup",
        url="https://hooks.example.com/q",
        method="GET",
        headers={"X-Key": "k"},
    )

    tool = build_custom_webhook_tool(info)

    assert tool["api_schema"] == {
        "url": "https://hooks.example.com/q",
        "method": "GET",
        "request_headers": {"X-Key": "k"},
    }


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("email-addr", "email_addr"),
        ("a--b..c!d", "a_b.c_d"),
        ("user@x.y", "user@x.y"),
    ],
)
def test_sanitize_field_id(raw: str, expected: str) -> None:
    assert sanitize_field_id(raw) == expected
