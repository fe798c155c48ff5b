"""
Toolset discovery endpoint.
"""

from fastapi import APIRouter
from pg_toolset_core.api.models import ToolsetResponse, ToolsetErrorResponse
from pg_toolset_core.lib.toolset import find_pg_commands

router = APIRouter()

@router.get("/toolset", response_model=ToolsetResponse, responses={
    503: {
        "description": "No usable toolset",
        "model": ToolsetErrorResponse
    }
})
def toolset():
    """
    Locate psql, pg_dump and pg_restore for the server environment.

    Uses PG_CONFIG when set, then psql in PATH, then a single pg_config in PATH.
    """
    config = find_pg_commands()
    return ToolsetResponse(**config.to_dict())
