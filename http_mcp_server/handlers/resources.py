"""
MCP Resource Registry

Holds the resources exposed by the server: each resource is a descriptor
(uri, name, description, mimeType) paired with a reader producing its
contents. Contents are produced on every read; nothing is cached.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Optional, Union

from pydantic import ValidationError

from ..errors import MCPProtocolError, ResourceNotFoundError, ToolError
from ..models import ResourceDescriptor, ResourceReadResult
from .tools import call_invoker

logger = logging.getLogger(__name__)

ResourceOutput = Union[ResourceReadResult, Mapping[str, Any]]
ResourceReader = Callable[[str], Union[ResourceOutput, Awaitable[ResourceOutput]]]


@dataclass(frozen=True)
class RegisteredResource:
    """A resource descriptor together with its reader."""
    descriptor: ResourceDescriptor
    reader: ResourceReader

    @property
    def uri(self) -> str:
        return self.descriptor.uri


class ResourceRegistry:
    """URI-keyed, ordered, read-only collection of resources."""

    def __init__(self, resources: Iterable[RegisteredResource] = ()) -> None:
        self._resources: Dict[str, RegisteredResource] = {}
        for resource in resources:
            if resource.uri in self._resources:
                raise ValueError(f"Duplicate resource URI: {resource.uri}")
            self._resources[resource.uri] = resource

    def __contains__(self, uri: object) -> bool:
        return uri in self._resources

    def __len__(self) -> int:
        return len(self._resources)

    def uris(self) -> List[str]:
        return list(self._resources)

    def list_resources(self) -> List[ResourceDescriptor]:
        """Snapshot of all resource descriptors in registration order."""
        return [resource.descriptor for resource in self._resources.values()]

    def get(self, uri: str) -> Optional[RegisteredResource]:
        return self._resources.get(uri)

    async def read(self, uri: str, timeout: Optional[float] = None) -> ResourceReadResult:
        """
        Read a resource by URI.

        Args:
            uri: Registered resource URI
            timeout: Optional deadline in seconds

        Returns:
            ResourceReadResult with the resource contents

        Raises:
            ResourceNotFoundError: If no resource is registered under ``uri``
            MCPProtocolError: If the reader fails or times out
        """
        resource = self._resources.get(uri)
        if resource is None:
            raise ResourceNotFoundError(uri)

        try:
            output = await asyncio.wait_for(call_invoker(resource.reader, uri), timeout)
        except asyncio.TimeoutError:
            logger.error(f"Resource '{uri}' timed out after {timeout}s")
            raise ToolError(f"resource read timed out after {timeout}s: {uri}")
        except MCPProtocolError:
            raise
        except Exception as e:
            logger.error(f"Error reading resource '{uri}': {e}", exc_info=True)
            raise ToolError(str(e) or type(e).__name__)

        if isinstance(output, ResourceReadResult):
            return output
        try:
            return ResourceReadResult.model_validate(output)
        except ValidationError as e:
            logger.error(f"Resource '{uri}' returned invalid contents: {e}")
            raise ToolError(f"resource returned invalid contents: {uri}")
