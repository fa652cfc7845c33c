"""convoflow.tools.cache

Friendly tool name → external tool handle cache.

Keys are `(workspace_key, tool_name)` so two workspaces never share a handle.
The cache is advisory: concurrent links may both register a tool, and the
last write wins.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple


class ToolHandleCache:
    def __init__(self):
        self._handles: Dict[Tuple[str, str], str] = {}

    def get(self, workspace_key: str, tool_name: str) -> Optional[str]:
        return self._handles.get((workspace_key, tool_name))

    def put(self, workspace_key: str, tool_name: str, handle: str) -> None:
        self._handles[(workspace_key, tool_name)] = handle

    def clear(self) -> None:
        self._handles.clear()

    def __len__(self) -> int:
        return len(self._handles)


_DEFAULT_CACHE: Optional[ToolHandleCache] = None


def get_default_tool_cache() -> ToolHandleCache:
    """Process-wide cache, created on first use."""
    global _DEFAULT_CACHE
    if _DEFAULT_CACHE is None:
        _DEFAULT_CACHE = ToolHandleCache()
    return _DEFAULT_CACHE
