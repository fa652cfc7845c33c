from __future__ import annotations

import pytest

from convoflow.logging import configure_logging, get_logger, mask_webhook_url


pytestmark = pytest.mark.basic


def test_mask_webhook_url_hides_secret_segment() -> None:
    secret = "0123456789abcdef" * 4
    url = f"https://voice.example.com/api/webhooks/elevenlabs/form/{secret}/form_1/agent_1"

    masked = mask_webhook_url(url)

    assert secret not in masked
    assert masked == "https://voice.example.com/api/webhooks/elevenlabs/form/[TOKEN]/form_1/agent_1"


def test_mask_webhook_url_leaves_other_urls() -> None:
    url = "https://hooks.example.com/appointment/short/x"

    assert mask_webhook_url(url) == url
    assert mask_webhook_url("") == ""


def test_configure_logging_is_idempotent() -> None:
    configure_logging(level="WARNING")
    configure_logging(level="DEBUG", json=True)

    logger = get_logger("convoflow.tests")
    logger.info("noop", key="value")
