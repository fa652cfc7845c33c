#!/usr/bin/env python3
"""
01_compile_flow.py - Compile a support flow and provision it in two phases

Demonstrates:
- Compiling editor nodes/edges into an engine workflow
- Condition nodes turning into guarded edges
- The hoisted first message and the feature report
- Two-phase provisioning against an in-process agent client

Requirements:
- convoflow (pip install -e .)

No network access: the agent client and tool registry below are stand-ins
that print what a real engine integration would receive.
"""

import json
from typing import Any, Dict, List, Optional

from convoflow import (
    FlowAgentProvisioner,
    ProvisioningSettings,
    ToolHandleCache,
    ToolLinker,
    compile_flow,
    configure_logging,
)


NODES = [
    {"id": "start", "type": "start"},
    {"id": "greet", "type": "message", "config": {"message": "Thanks for calling Acme. How can I help?"}},
    {"id": "ask", "type": "question", "config": {"question": "Is this about an existing order?", "variableName": "has_order"}},
    {"id": "route", "type": "condition"},
    {"id": "orders", "type": "transfer", "config": {"phoneNumber": "+15550001111", "transferType": "blind"}},
    {"id": "book", "type": "appointment", "config": {"serviceName": "Product demo"}},
    {"id": "crm", "type": "webhook", "config": {"url": "https://hooks.example.com/acme/lead", "payload": {"source": "ivr"}}},
    {"id": "bye", "type": "end"},
]

EDGES = [
    {"id": "e1", "source": "start", "target": "greet"},
    {"id": "e2", "source": "greet", "target": "ask"},
    {"id": "e3", "source": "ask", "target": "route"},
    {"id": "e4", "source": "route", "target": "orders", "sourceHandle": "yes"},
    {"id": "e5", "source": "route", "target": "book", "sourceHandle": "no"},
    {"id": "e6", "source": "book", "target": "crm"},
    {"id": "e7", "source": "crm", "target": "bye"},
]


class PrintingAgentClient:
    def create_agent(self, *, workflow: Dict[str, Any], first_message: Optional[str], tools: List[Dict[str, Any]]) -> str:
        print(f"[create] first_message={first_message!r} tools={[t['name'] for t in tools]}")
        return "agent_demo00000001"

    def update_agent(self, agent_id: str, *, workflow: Dict[str, Any], tools: List[Dict[str, Any]]) -> None:
        print(f"[update] {agent_id} tools={[t['name'] for t in tools]}")


class LocalToolRegistry:
    def __init__(self) -> None:
        self._tools: Dict[str, str] = {}

    def find_tool(self, name: str, url: str) -> Optional[str]:
        return self._tools.get(f"{name}|{url}")

    def create_tool(self, tool_config: Dict[str, Any]) -> str:
        tool_id = f"tool_{len(self._tools) + 1:04d}"
        self._tools[f"{tool_config['name']}|{tool_config['api_schema']['url']}"] = tool_id
        return tool_id


def main() -> None:
    configure_logging(level="INFO")

    result = compile_flow(NODES, EDGES)
    print(json.dumps(result.workflow.to_dict(), indent=2))
    print(f"first message: {result.first_message!r}")
    print(f"valid: {result.validation.valid} warnings: {result.validation.warnings}")

    settings = ProvisioningSettings(public_domain="voice.example.com")
    linker = ToolLinker(LocalToolRegistry(), workspace_key="demo", cache=ToolHandleCache())
    outcome = FlowAgentProvisioner(PrintingAgentClient(), settings, linker=linker).provision(result)
    print(f"agent: {outcome.agent_id} tools: {outcome.tool_handles}")


if __name__ == "__main__":
    main()
