"""
Static catalog of the demo tools and resources.

Builds the registries the server starts with. Descriptors are declared here
as plain metadata and paired with the collaborator that implements them.
"""

from typing import Any, Dict, Optional, Tuple

from ..handlers import RegisteredResource, RegisteredTool, ResourceRegistry, ToolRegistry
from ..models import ResourceDescriptor, ToolDescriptor
from .users import UserDirectory, UserService, default_directory
from .weather import WEATHER_OUTPUT_SCHEMA, get_weather

# Tool metadata, in the order tools/list reports them
TOOL_DEFINITIONS: Dict[str, Dict[str, Any]] = {
    "search_users": {
        "description": "Search users by keyword",
        "inputSchema": {
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Search keyword"},
                "limit": {"type": "number", "description": "Number of results to return", "default": 10}
            },
            "required": []
        }
    },
    "create_user": {
        "description": "Create a new user",
        "inputSchema": {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "email": {"type": "string"},
                "role": {"type": "string", "enum": ["admin", "user", "guest"]}
            },
            "required": ["name", "email"]
        }
    },
    "get_weather": {
        "description": "Get weather information for a city",
        "inputSchema": {
            "type": "object",
            "properties": {
                "city": {"type": "string", "description": "City name"}
            },
            "required": ["city"]
        },
        "outputSchema": WEATHER_OUTPUT_SCHEMA
    }
}

# Resource metadata keyed by URI
RESOURCE_DEFINITIONS: Dict[str, Dict[str, Any]] = {
    "user://recent": {
        "name": "Recently active users",
        "description": "List of recently active users",
        "mimeType": "text/plain"
    },
    "system://stats": {
        "name": "System statistics",
        "description": "System statistics as JSON",
        "mimeType": "application/json"
    }
}


def build_registries(
    directory: Optional[UserDirectory] = None
) -> Tuple[ToolRegistry, ResourceRegistry]:
    """
    Build the default tool and resource registries.

    Args:
        directory: User directory to back the user tools; a freshly seeded
            one is created when omitted

    Returns:
        Tuple of (ToolRegistry, ResourceRegistry)
    """
    users = UserService(directory or default_directory())

    invokers = {
        "search_users": users.search_users,
        "create_user": users.create_user,
        "get_weather": get_weather,
    }
    readers = {
        "user://recent": users.read_recent,
        "system://stats": users.read_stats,
    }

    tools = ToolRegistry(
        RegisteredTool(
            descriptor=ToolDescriptor(name=name, **metadata),
            invoker=invokers[name]
        )
        for name, metadata in TOOL_DEFINITIONS.items()
    )
    resources = ResourceRegistry(
        RegisteredResource(
            descriptor=ResourceDescriptor(uri=uri, **metadata),
            reader=readers[uri]
        )
        for uri, metadata in RESOURCE_DEFINITIONS.items()
    )
    return tools, resources
