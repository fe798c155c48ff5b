"""
Main FastAPI application for pg-toolset-core.
"""

from fastapi import FastAPI
from .health import router as health_router
from .toolset import router as toolset_router
from .errors import not_found_handler, toolset_error_handler
from pg_toolset_core.lib.errors import ToolsetError

app = FastAPI(
    title="pg-toolset-core API",
    description="Locate the PostgreSQL client programs available to the server",
    version="0.1.0"
)

# Register routers
app.include_router(health_router, tags=["system"])
app.include_router(toolset_router, tags=["toolset"])

# Add error handlers
app.add_exception_handler(404, not_found_handler)
app.add_exception_handler(ToolsetError, toolset_error_handler)

# To run: uvicorn pg_toolset_core.api:app --host 127.0.0.1 --port 8000
