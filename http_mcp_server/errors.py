"""
JSON-RPC error codes and the exception hierarchy of the protocol layer.

Every exception here knows its JSON-RPC code and converts itself into the
ErrorObject sent back to the client.
"""

from typing import Any, Optional

from .models import ErrorObject


class ErrorCode:
    """JSON-RPC 2.0 standard error codes."""
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


class MCPProtocolError(Exception):
    """Base error for all failures surfaced to the client as a JSON-RPC error."""

    code: int = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, data: Any = None, code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.data = data
        if code is not None:
            self.code = code

    def to_error_object(self) -> ErrorObject:
        return ErrorObject(code=self.code, message=self.message, data=self.data)


class ParseError(MCPProtocolError):
    """Payload could not be decoded into a JSON-RPC message at all."""
    code = ErrorCode.PARSE_ERROR


class InvalidRequestError(MCPProtocolError):
    """Decodable message that is not a structurally valid request."""
    code = ErrorCode.INVALID_REQUEST


class MethodNotFoundError(MCPProtocolError):
    code = ErrorCode.METHOD_NOT_FOUND

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"method not found: {method}")


class ToolNotFoundError(MethodNotFoundError):
    """Requested tool does not exist in the registry.

    Reported with the method-not-found code, like an unknown method.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        MCPProtocolError.__init__(self, f"unknown tool: {name}")


class InvalidParamsError(MCPProtocolError):
    code = ErrorCode.INVALID_PARAMS


class ResourceNotFoundError(InvalidParamsError):
    """Requested resource URI does not exist in the registry."""

    def __init__(self, uri: str) -> None:
        self.uri = uri
        super().__init__(f"resource not found: {uri}")


class ToolError(MCPProtocolError):
    """Raised by tool and resource implementations to report a failure.

    Defaults to the invalid-params code; an implementation may pass another
    code and structured ``data``.
    """
    code = ErrorCode.INVALID_PARAMS


class InternalError(MCPProtocolError):
    code = ErrorCode.INTERNAL_ERROR
