"""
Demo business logic behind the MCP tools and resources.

- users: in-memory user directory (search_users, create_user, user://recent, system://stats)
- weather: mock forecasts (get_weather)
- catalog: descriptors and the default registries
"""

from .catalog import build_registries

__all__ = ["build_registries"]
