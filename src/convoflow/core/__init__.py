"""Core configuration for convoflow."""

from .config import (
    CompilerConfig,
    ConfigurationError,
    ProvisioningSettings,
    validate_webhook_token,
)

__all__ = [
    "CompilerConfig",
    "ConfigurationError",
    "ProvisioningSettings",
    "validate_webhook_token",
]
