"""
Model Context Protocol (MCP) Server over JSON-RPC 2.0

This package implements an MCP server that exposes:
- Tools: search_users, create_user, get_weather
- Resources: recent users (user://recent), system statistics (system://stats)

Every message is a JSON-RPC 2.0 envelope posted to a single HTTP endpoint.
The protocol core (validation, dispatch, registries, encoding) does not know
anything about the demo tools; they are plugged in through the registries.
"""

__version__ = "1.0.0"
