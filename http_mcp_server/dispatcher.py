"""
MCP Method Dispatcher

Routes validated JSON-RPC requests to the handler registered for their method
and turns every outcome, including failures, into a response envelope.

The dispatcher is the single place where exceptions become JSON-RPC errors:
``dispatch`` and ``handle_raw`` always return an envelope and never raise.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from pydantic import BaseModel, ValidationError

from .config import Settings, get_settings
from .errors import InternalError, InvalidParamsError, MCPProtocolError, MethodNotFoundError
from .handlers import ResourceRegistry, ToolRegistry
from .jsonrpc import (
    decode_message,
    encode_error,
    encode_result,
    request_id_of,
    validate_request,
)
from .models import (
    InitializeResult,
    ResourceListResult,
    ResourceReadParams,
    ServerInfo,
    ToolCallParams,
    ToolListResult,
)

logger = logging.getLogger(__name__)

MethodHandler = Callable[[Any], Awaitable[Union[BaseModel, Dict[str, Any]]]]


def _parse_params(model: type, params: Any, method: str) -> Any:
    """Validate method params against a params model."""
    if params is None:
        params = {}
    if not isinstance(params, dict):
        raise InvalidParamsError(f"Invalid params for {method}: expected an object")
    try:
        return model.model_validate(params)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        )
        raise InvalidParamsError(f"Invalid params for {method}: {problems}")


class MCPDispatcher:
    """
    Dispatches MCP methods against a tool registry and a resource registry.

    Registries and settings are injected at construction; the dispatch table
    is fixed for the lifetime of the instance.
    """

    def __init__(
        self,
        tools: ToolRegistry,
        resources: ResourceRegistry,
        settings: Optional[Settings] = None
    ) -> None:
        self.tools = tools
        self.resources = resources
        self.settings = settings or get_settings()
        self._handlers: Dict[str, MethodHandler] = {
            "initialize": self._handle_initialize,
            "ping": self._handle_ping,
            "tools/list": self._handle_tools_list,
            "tools/call": self._handle_tools_call,
            "resources/list": self._handle_resources_list,
            "resources/read": self._handle_resources_read,
        }

    @property
    def methods(self) -> List[str]:
        return list(self._handlers)

    async def handle_raw(self, raw: Union[str, bytes, bytearray]) -> Dict[str, Any]:
        """Decode a raw payload and dispatch it. Undecodable payloads answer with id null."""
        try:
            message = decode_message(raw)
        except MCPProtocolError as e:
            logger.warning(f"Rejected undecodable payload: {e.message}")
            return encode_error(None, e)
        return await self.dispatch(message)

    async def dispatch(self, message: Any) -> Dict[str, Any]:
        """
        Validate, route and handle one decoded message.

        Args:
            message: Decoded JSON-RPC message

        Returns:
            JSON-RPC response envelope
        """
        request_id = request_id_of(message)

        try:
            request = validate_request(message)
        except MCPProtocolError as e:
            logger.warning(f"Invalid request (id={request_id!r}): {e.message}")
            return encode_error(request_id, e)

        logger.debug(f"Dispatching {request.method} (id={request.id!r})")

        handler = self._handlers.get(request.method)
        try:
            if handler is None:
                raise MethodNotFoundError(request.method)
            result = await handler(request.params)
        except MCPProtocolError as e:
            logger.warning(f"{request.method} failed (id={request.id!r}): [{e.code}] {e.message}")
            return encode_error(request.id, e)
        except Exception as e:
            logger.error(f"Unhandled error in {request.method}: {e}", exc_info=True)
            return encode_error(request.id, InternalError("Internal error", data={"type": type(e).__name__}))

        return encode_result(request.id, result)

    # ========================================================================
    # Method Handlers
    # ========================================================================

    async def _handle_initialize(self, params: Any) -> InitializeResult:
        return InitializeResult(
            protocolVersion=self.settings.protocol_version,
            serverInfo=ServerInfo(
                name=self.settings.server_name,
                version=self.settings.server_version
            )
        )

    async def _handle_ping(self, params: Any) -> Dict[str, Any]:
        return {}

    async def _handle_tools_list(self, params: Any) -> ToolListResult:
        return ToolListResult(tools=self.tools.list_tools())

    async def _handle_tools_call(self, params: Any) -> Any:
        call = _parse_params(ToolCallParams, params, "tools/call")
        return await self.tools.invoke(
            call.name,
            call.arguments,
            timeout=self.settings.request_timeout
        )

    async def _handle_resources_list(self, params: Any) -> ResourceListResult:
        return ResourceListResult(resources=self.resources.list_resources())

    async def _handle_resources_read(self, params: Any) -> Any:
        read = _parse_params(ResourceReadParams, params, "resources/read")
        return await self.resources.read(read.uri, timeout=self.settings.request_timeout)
