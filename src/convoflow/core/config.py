"""convoflow.core.config

Compiler and provisioning configuration.

`CompilerConfig` holds the constants the compiler writes into every workflow
(synthetic start id, default texts). `ProvisioningSettings` holds host-side
values that only matter once tools are attached to an external agent: the
public domain used in webhook URLs and the shared secrets embedded in them.
"""

from __future__ import annotations

import hmac
import os
import secrets
from dataclasses import dataclass, field
from typing import Mapping, Optional

DEFAULT_START_NODE_ID = "start_node"
DEFAULT_ELEVENLABS_API_BASE_URL = "https://api.elevenlabs.io/v1"
DEFAULT_HTTP_TIMEOUT_S = 30.0


class ConfigurationError(ValueError):
    """Raised when required host configuration is missing or malformed."""


@dataclass(frozen=True)
class CompilerConfig:
    """Constants used while compiling a flow.

    Attributes:
        start_node_id: Id of the synthetic Start node added to every workflow.
        default_transfer_type: Transfer style when a transfer node does not set one.
        default_appointment_duration: Minutes passed to the booking tool by default.
        default_message: Spoken text for message nodes without text.
        default_question: Spoken text for question nodes without text.
        default_response_variable: Variable name for question answers.
        default_delay_message: Filler utterance for delay nodes.
        default_instruction: Instruction for unknown nodes with no message.
    """

    start_node_id: str = DEFAULT_START_NODE_ID
    default_transfer_type: str = "conference"
    default_appointment_duration: int = 30
    default_message: str = "Hello"
    default_question: str = "How can I help you?"
    default_response_variable: str = "response"
    default_delay_message: str = "One moment please..."
    default_instruction: str = "Continue the conversation naturally."


def _normalize_domain(raw: str) -> str:
    s = str(raw or "").strip().rstrip("/")
    if not s:
        return ""
    if not s.startswith(("http://", "https://")):
        s = "https://" + s
    return s


def _read_timeout(raw: Optional[str]) -> float:
    if raw is None or not str(raw).strip():
        return DEFAULT_HTTP_TIMEOUT_S
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigurationError(f"CONVOFLOW_HTTP_TIMEOUT_S must be a number, got {raw!r}") from e
    if value <= 0:
        raise ConfigurationError("CONVOFLOW_HTTP_TIMEOUT_S must be positive")
    return value


@dataclass(frozen=True)
class ProvisioningSettings:
    """Host settings for Phase-2 tool definitions and the external tool registry."""

    public_domain: str
    appointment_webhook_secret: str = field(default_factory=lambda: secrets.token_hex(32))
    form_webhook_secret: str = field(default_factory=lambda: secrets.token_hex(32))
    api_base_url: str = DEFAULT_ELEVENLABS_API_BASE_URL
    http_timeout_s: float = DEFAULT_HTTP_TIMEOUT_S

    def __post_init__(self) -> None:
        domain = _normalize_domain(self.public_domain)
        if not domain:
            raise ConfigurationError("Unable to determine domain for webhooks. Please set APP_DOMAIN.")
        object.__setattr__(self, "public_domain", domain)

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        fallback_host: Optional[str] = None,
    ) -> "ProvisioningSettings":
        """Build settings from environment variables.

        Domain priority:
        1) `DEV_DOMAIN` when `NODE_ENV` is not `production`
        2) `APP_DOMAIN`
        3) `fallback_host` (e.g. the request host)
        """
        env = os.environ if environ is None else environ

        domain = ""
        dev = str(env.get("DEV_DOMAIN") or "").strip()
        if dev and str(env.get("NODE_ENV") or "").strip() != "production":
            domain = dev
        elif str(env.get("APP_DOMAIN") or "").strip():
            domain = str(env["APP_DOMAIN"]).strip()
        elif fallback_host:
            domain = fallback_host

        kwargs = {}
        appointment_secret = str(env.get("APPOINTMENT_WEBHOOK_SECRET") or "").strip()
        if appointment_secret:
            kwargs["appointment_webhook_secret"] = appointment_secret
        form_secret = str(env.get("FORM_WEBHOOK_SECRET") or "").strip()
        if form_secret:
            kwargs["form_webhook_secret"] = form_secret

        return cls(
            public_domain=domain,
            api_base_url=str(env.get("ELEVENLABS_API_BASE_URL") or DEFAULT_ELEVENLABS_API_BASE_URL).rstrip("/"),
            http_timeout_s=_read_timeout(env.get("CONVOFLOW_HTTP_TIMEOUT_S")),
            **kwargs,
        )


def validate_webhook_token(provided: Optional[str], secret: str) -> bool:
    """Constant-time check of a webhook path token against the shared secret."""
    if not provided or not secret:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), secret.encode("utf-8"))
