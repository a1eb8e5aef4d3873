"""Agent interface module."""

from .interface import AgentEditTools, ToolResult

__all__ = ["AgentEditTools", "ToolResult"]
