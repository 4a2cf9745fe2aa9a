"""
JSON-RPC 2.0 decoding, validation and response encoding.

Decoding turns a raw payload into a message mapping, validation turns a
decoded message into a JsonRpcRequest, and the encoder wraps an outcome into
the response envelope. All three are pure functions.

See: https://www.jsonrpc.org/specification
"""

import json
from typing import Any, Dict, Mapping, Union

from pydantic import BaseModel, ValidationError

from .errors import InvalidRequestError, MCPProtocolError, ParseError
from .models import ErrorObject, JsonRpcRequest, JsonRpcResponse


# ============================================================================
# Request Validation
# ============================================================================

def decode_message(raw: Union[str, bytes, bytearray]) -> Dict[str, Any]:
    """
    Decode a raw payload into a message mapping.

    Args:
        raw: Request body as received from the transport

    Returns:
        The decoded JSON object

    Raises:
        ParseError: If the payload is not valid JSON or is not a JSON object
    """
    try:
        message = json.loads(raw)
    except (UnicodeDecodeError, ValueError) as e:
        raise ParseError(f"Parse error: {e}")

    if not isinstance(message, dict):
        raise ParseError(f"Parse error: expected a JSON object, got {type(message).__name__}")

    return message


def _describe_validation_error(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "request"
        problems.append(f"{field}: {error['msg']}")
    return "; ".join(problems)


def validate_request(message: Any) -> JsonRpcRequest:
    """
    Check the structure of a decoded message.

    Args:
        message: Decoded JSON value

    Returns:
        JsonRpcRequest ready for dispatch

    Raises:
        InvalidRequestError: If the message is not a mapping, jsonrpc is not
            exactly "2.0", or method is missing, not a string, or empty
    """
    if not isinstance(message, Mapping):
        raise InvalidRequestError(
            f"Invalid Request: expected an object, got {type(message).__name__}"
        )

    try:
        return JsonRpcRequest.model_validate(dict(message))
    except ValidationError as e:
        raise InvalidRequestError(f"Invalid Request: {_describe_validation_error(e)}")


def request_id_of(message: Any) -> Any:
    """Best-effort id of a message that may have failed validation."""
    if isinstance(message, Mapping):
        return message.get("id")
    return None


# ============================================================================
# Response Encoding
# ============================================================================

def encode_result(request_id: Any, result: Any) -> Dict[str, Any]:
    """
    Wrap a successful outcome into a response envelope.

    Pydantic results are dumped to plain JSON-compatible values; optional
    fields that are unset are left out.
    """
    if isinstance(result, BaseModel):
        result = result.model_dump(mode="json", exclude_none=True)
    return JsonRpcResponse(id=request_id, result=result).to_wire()


def encode_error(request_id: Any, error: Union[ErrorObject, MCPProtocolError]) -> Dict[str, Any]:
    """Wrap an error into a response envelope."""
    if isinstance(error, MCPProtocolError):
        error = error.to_error_object()
    return JsonRpcResponse(id=request_id, error=error).to_wire()
