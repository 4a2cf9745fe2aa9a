"""
MCP Server - Main FastAPI Application

Exposes the JSON-RPC 2.0 MCP endpoint:
- POST /mcp: one JSON-RPC message per request body
- GET /health: liveness check

Every message posted to /mcp gets a JSON-RPC envelope back with HTTP 200,
including parse errors and rejected requests.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .collaborators import build_registries
from .config import get_settings
from .dispatcher import MCPDispatcher
from .errors import InternalError
from .jsonrpc import encode_error

settings = get_settings()

# Configure logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


def create_app(dispatcher: Optional[MCPDispatcher] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        dispatcher: Dispatcher to serve; defaults to one over the demo catalog

    Returns:
        Configured FastAPI app
    """
    if dispatcher is None:
        tools, resources = build_registries()
        dispatcher = MCPDispatcher(tools, resources, settings)

    app = FastAPI(
        title="HTTP MCP Server",
        description="Model Context Protocol server exposing tools and resources over JSON-RPC 2.0",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.dispatcher = dispatcher

    # CORS middleware for cross-origin requests
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ========================================================================
    # Error Handlers
    # ========================================================================

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Answer unexpected failures with a JSON-RPC internal error."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=encode_error(
                None,
                InternalError("Internal error", data={"type": type(exc).__name__})
            )
        )

    # ========================================================================
    # Health Check
    # ========================================================================

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": "MCP Server",
            "version": __version__
        }

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "service": settings.server_name,
            "version": __version__,
            "protocol": "Model Context Protocol",
            "endpoints": {
                "mcp": "POST /mcp",
                "methods": ", ".join(app.state.dispatcher.methods),
                "docs": "/docs"
            }
        }

    # ========================================================================
    # MCP Endpoint
    # ========================================================================

    @app.post("/mcp", tags=["MCP"], summary="Handle a JSON-RPC message")
    async def mcp_endpoint(request: Request):
        """
        Handle one JSON-RPC 2.0 message.

        The body is decoded by the dispatcher itself so that malformed JSON is
        answered with a parse error instead of an HTTP validation error.
        """
        body = await request.body()
        response = await request.app.state.dispatcher.handle_raw(body)
        return JSONResponse(content=response)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
