"""External tool registry collaborator.

`ToolRegistry` is the interface the Tool Linker consumes. `ElevenLabsToolRegistry`
implements it over the engine's workspace-tools endpoints:

- `GET  {base}/convai/tools` → `{"tools": [{"id", "tool_config": {...}}]}`
- `POST {base}/convai/tools` with `{"tool_config": {...}}` → `{"id", ...}`

HTTP goes through an injectable request sender (httpx by default) so tests
never touch the network.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

from ..core.config import DEFAULT_ELEVENLABS_API_BASE_URL, DEFAULT_HTTP_TIMEOUT_S, ProvisioningSettings
from ..logging import get_logger, mask_webhook_url

logger = get_logger(__name__)


class ToolRegistryError(RuntimeError):
    """Raised when the external registry returns an unusable response."""


class ToolRegistry(Protocol):
    def find_tool(self, name: str, url: str) -> Optional[str]: ...

    def create_tool(self, tool_config: Dict[str, Any]) -> str: ...


@dataclass(frozen=True)
class HttpResponse:
    body: Any
    status_code: int = 200


class RequestSender(Protocol):
    def get(self, url: str, *, headers: Dict[str, str], timeout: float) -> Any: ...

    def post(
        self,
        url: str,
        *,
        headers: Dict[str, str],
        json: Dict[str, Any],
        timeout: float,
    ) -> Any: ...


class HttpxRequestSender:
    """Default request sender based on httpx (sync)."""

    def __init__(self):
        import httpx

        self._httpx = httpx

    def get(self, url: str, *, headers: Dict[str, str], timeout: float) -> HttpResponse:
        resp = self._httpx.get(url, headers=headers, timeout=timeout)
        resp.raise_for_status()
        return HttpResponse(body=resp.json(), status_code=resp.status_code)

    def post(
        self,
        url: str,
        *,
        headers: Dict[str, str],
        json: Dict[str, Any],
        timeout: float,
    ) -> HttpResponse:
        resp = self._httpx.post(url, headers=headers, json=json, timeout=timeout)
        resp.raise_for_status()
        return HttpResponse(body=resp.json(), status_code=resp.status_code)


def _body(value: Any) -> Any:
    if isinstance(value, (dict, list)):
        return value
    body = getattr(value, "body", None)
    if body is not None:
        return body
    json_fn = getattr(value, "json", None)
    if callable(json_fn):
        return json_fn()
    return None


def workspace_key_for_api_key(api_key: str) -> str:
    """Workspace identifier used in cache keys (key prefix, never the full key)."""
    return str(api_key or "")[:8]


class ElevenLabsToolRegistry:
    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_ELEVENLABS_API_BASE_URL,
        timeout_s: float = DEFAULT_HTTP_TIMEOUT_S,
        request_sender: Optional[RequestSender] = None,
    ):
        if not api_key:
            raise ValueError("api_key is required")
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._sender = request_sender or HttpxRequestSender()

    @classmethod
    def from_settings(
        cls,
        api_key: str,
        settings: ProvisioningSettings,
        *,
        request_sender: Optional[RequestSender] = None,
    ) -> "ElevenLabsToolRegistry":
        return cls(
            api_key,
            base_url=settings.api_base_url,
            timeout_s=settings.http_timeout_s,
            request_sender=request_sender,
        )

    @property
    def workspace_key(self) -> str:
        return workspace_key_for_api_key(self._api_key)

    def _headers(self) -> Dict[str, str]:
        return {"xi-api-key": self._api_key, "Content-Type": "application/json"}

    def list_tools(self) -> List[Dict[str, Any]]:
        body = _body(self._sender.get(f"{self._base_url}/convai/tools", headers=self._headers(), timeout=self._timeout_s))
        if not isinstance(body, dict):
            raise ToolRegistryError("Tool listing response is not a JSON object")
        tools = body.get("tools") or []
        if not isinstance(tools, list):
            raise ToolRegistryError("Tool listing response has no 'tools' array")
        return [t for t in tools if isinstance(t, dict)]

    def find_tool(self, name: str, url: str) -> Optional[str]:
        # Same-named tools exist per agent; the URL tells them apart.
        for t in self.list_tools():
            cfg = t.get("tool_config")
            if not isinstance(cfg, dict):
                continue
            api_schema = cfg.get("api_schema") if isinstance(cfg.get("api_schema"), dict) else {}
            if cfg.get("name") == name and api_schema.get("url") == url and t.get("id"):
                return str(t["id"])
        return None

    def create_tool(self, tool_config: Dict[str, Any]) -> str:
        api_schema = tool_config.get("api_schema") or {}
        logger.info(
            "Creating workspace tool",
            tool=tool_config.get("name"),
            url=mask_webhook_url(str(api_schema.get("url") or "")),
        )
        body = _body(
            self._sender.post(
                f"{self._base_url}/convai/tools",
                headers=self._headers(),
                json={"tool_config": tool_config},
                timeout=self._timeout_s,
            )
        )
        tool_id = body.get("id") if isinstance(body, dict) else None
        if not isinstance(tool_id, str) or not tool_id:
            raise ToolRegistryError(f"Tool creation for {tool_config.get('name')!r} returned no id")
        return tool_id
