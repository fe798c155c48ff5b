"""
Custom error handlers for the API.
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from pg_toolset_core.api.models import ToolsetErrorResponse
from pg_toolset_core.lib.errors import AmbiguousConfigurationError, ToolsetError

async def toolset_error_handler(request: Request, exc: ToolsetError):
    """Discovery failures mean the server has no usable toolset"""
    error = ToolsetErrorResponse(error=type(exc).__name__, detail=str(exc))
    if isinstance(exc, AmbiguousConfigurationError):
        error.candidates = exc.candidates
        error.versions = exc.versions
    return JSONResponse(status_code=503, content=error.model_dump())

async def not_found_handler(request: Request, exc):
    """Handle 404 errors"""
    return JSONResponse(
        status_code=404,
        content={"error": "Endpoint not found", "path": str(request.url.path)}
    )
