"""
MCP Protocol Request/Response Models

This module defines Pydantic models for the JSON-RPC 2.0 envelope and the MCP
payloads carried inside it (tools, resources, initialize).
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional, Dict, Any, List, Literal

# A content item is a tagged mapping, e.g. {"type": "text", "text": "..."}.
ContentItem = Dict[str, Any]


def text_content(text: str) -> ContentItem:
    """Build a text content item."""
    return {"type": "text", "text": text}


# ============================================================================
# JSON-RPC Envelope Models
# ============================================================================

class JsonRpcRequest(BaseModel):
    """A validated JSON-RPC 2.0 request."""
    jsonrpc: Literal["2.0"] = Field(..., description="Protocol marker, must be exactly '2.0'")
    id: Optional[Any] = Field(None, description="Client correlation token, echoed verbatim")
    method: str = Field(..., min_length=1, description="Method name")
    params: Optional[Any] = Field(None, description="Method parameters")


class ErrorObject(BaseModel):
    """JSON-RPC error object."""
    code: int = Field(..., description="Error code")
    message: str = Field(..., description="Error message")
    data: Optional[Any] = Field(None, description="Additional error data")


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response carrying exactly one of result or error."""
    jsonrpc: Literal["2.0"] = "2.0"
    id: Optional[Any] = None
    result: Optional[Any] = None
    error: Optional[ErrorObject] = None

    @model_validator(mode="after")
    def _exactly_one_outcome(self) -> "JsonRpcResponse":
        has_result = "result" in self.model_fields_set and self.result is not None
        has_error = self.error is not None
        if has_result == has_error:
            raise ValueError("response must carry exactly one of 'result' or 'error'")
        return self

    def to_wire(self) -> Dict[str, Any]:
        """Serialize to the wire envelope, omitting the absent outcome."""
        envelope: Dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            envelope["error"] = self.error.model_dump(exclude_none=True)
        else:
            envelope["result"] = self.result
        return envelope


# ============================================================================
# Initialize Models
# ============================================================================

class ListReadCapability(BaseModel):
    list: bool = True
    read: bool = True


class ToolsCapability(BaseModel):
    list: bool = True
    call: bool = True


class ServerCapabilities(BaseModel):
    """Capabilities advertised by initialize."""
    roots: ListReadCapability = Field(default_factory=ListReadCapability)
    resources: ListReadCapability = Field(default_factory=ListReadCapability)
    tools: ToolsCapability = Field(default_factory=ToolsCapability)


class ServerInfo(BaseModel):
    name: str = Field(..., description="Server name")
    version: str = Field(..., description="Server version")


class InitializeResult(BaseModel):
    """Result of the initialize method."""
    protocolVersion: str = Field(..., description="MCP protocol version")
    capabilities: ServerCapabilities = Field(default_factory=ServerCapabilities)
    serverInfo: ServerInfo


# ============================================================================
# Tool Models
# ============================================================================

class ToolDescriptor(BaseModel):
    """MCP tool definition schema."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Tool name/identifier")
    description: str = Field(..., description="Tool description")
    inputSchema: Dict[str, Any] = Field(..., description="JSON schema for tool inputs")
    outputSchema: Optional[Dict[str, Any]] = Field(None, description="JSON schema for structured output")


class ToolListResult(BaseModel):
    """Result of tools/list."""
    tools: List[ToolDescriptor] = Field(..., description="List of available tools")


class ToolCallParams(BaseModel):
    """Parameters of tools/call."""
    name: str = Field(..., description="Tool name to call")
    arguments: Dict[str, Any] = Field(default_factory=dict, description="Tool arguments")

    @field_validator("arguments", mode="before")
    @classmethod
    def _null_arguments_are_empty(cls, value: Any) -> Any:
        return {} if value is None else value


class ToolCallResult(BaseModel):
    """Result of tools/call."""
    model_config = ConfigDict(extra="allow")

    content: List[ContentItem] = Field(..., description="Tool output content")
    structuredContent: Optional[Any] = Field(None, description="Structured output matching outputSchema")


# ============================================================================
# Resource Models
# ============================================================================

class ResourceDescriptor(BaseModel):
    """MCP resource definition schema."""
    model_config = ConfigDict(frozen=True)

    uri: str = Field(..., min_length=1, description="Resource URI")
    name: str = Field(..., description="Resource name")
    description: Optional[str] = Field(None, description="Resource description")
    mimeType: Optional[str] = Field(None, description="MIME type of the resource")


class ResourceListResult(BaseModel):
    """Result of resources/list."""
    resources: List[ResourceDescriptor] = Field(..., description="List of available resources")


class ResourceReadParams(BaseModel):
    """Parameters of resources/read."""
    uri: str = Field(..., description="Resource URI to read")


class ResourceReadResult(BaseModel):
    """Result of resources/read."""
    model_config = ConfigDict(extra="allow")

    contents: List[ContentItem] = Field(..., description="Resource contents")
