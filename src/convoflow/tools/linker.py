"""Tool Linker: register tools externally and point workflow tool nodes at them.

Tool nodes are compiled with friendly names (`webhook_<node>`, `play_audio_<id>`).
The engine dispatches by its own tool ids, so after registration every tool
reference with a resolved handle is rewritten in place.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..logging import get_logger, mask_webhook_url
from ..workflow.models import WorkflowGraph
from .cache import ToolHandleCache, get_default_tool_cache
from .registry import ToolRegistry

logger = get_logger(__name__)


def _tool_url(tool: Dict[str, Any]) -> str:
    api_schema = tool.get("api_schema")
    if isinstance(api_schema, dict):
        return str(api_schema.get("url") or "")
    return ""


class ToolLinker:
    def __init__(
        self,
        registry: ToolRegistry,
        *,
        workspace_key: str,
        cache: Optional[ToolHandleCache] = None,
    ):
        self._registry = registry
        self._workspace_key = workspace_key
        self._cache = cache if cache is not None else get_default_tool_cache()

    def resolve(self, tool: Dict[str, Any]) -> str:
        """Return the external handle for `tool`: cache, then registry lookup, then create."""
        name = str(tool.get("name") or "")
        if not name:
            raise ValueError("Tool config has no name")

        cached = self._cache.get(self._workspace_key, name)
        if cached:
            logger.debug("Using cached tool handle", tool=name, handle=cached)
            return cached

        handle = self._registry.find_tool(name, _tool_url(tool))
        if handle:
            logger.debug("Found existing external tool", tool=name, handle=handle)
        else:
            handle = self._registry.create_tool(tool)
        self._cache.put(self._workspace_key, name, handle)
        return handle

    def register_and_rewrite(self, webhook_tools: Sequence[Dict[str, Any]], workflow: WorkflowGraph) -> Dict[str, str]:
        """Register each tool and rewrite tool references in `workflow`.

        Returns friendly name → external handle. A tool that fails to register
        maps to its own name and its references are left untouched.
        """
        mapping: Dict[str, str] = {}
        if not webhook_tools:
            return mapping

        for tool in webhook_tools:
            name = str(tool.get("name") or "")
            try:
                mapping[name] = self.resolve(tool)
            except Exception as e:
                logger.error(
                    "Failed to register tool; keeping friendly name",
                    tool=name,
                    url=mask_webhook_url(_tool_url(tool)),
                    error=str(e),
                )
                mapping[name] = name

        for nid, node in workflow.tool_nodes():
            rewritten = []
            for tid in node.tool_ids:
                handle = mapping.get(tid)
                if handle and handle != tid:
                    logger.debug("Rewriting tool reference", node_id=nid, tool=tid, handle=handle)
                    rewritten.append(handle)
                else:
                    rewritten.append(tid)
            node.tool_ids = rewritten

        logger.info("Registered workflow tools", count=len(mapping))
        return mapping
