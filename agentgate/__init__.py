"""AgentGate — MCP gateway agent management and tool-call audit log."""
