"""
MCP Registries

This package contains the registries the dispatcher routes to:
- tools: Tool descriptors and their invokers
- resources: Resource descriptors and their readers
"""

from .resources import RegisteredResource, ResourceRegistry
from .tools import RegisteredTool, ToolRegistry

__all__ = ["RegisteredResource", "RegisteredTool", "ResourceRegistry", "ToolRegistry"]
