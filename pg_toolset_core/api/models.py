"""
Pydantic models for API responses.
"""

from typing import Dict, List

from pydantic import BaseModel, Field


class ToolsetResponse(BaseModel):
    """Resolved PostgreSQL client programs."""
    psql: str = Field(..., examples=["/usr/lib/postgresql/14/bin/psql"])
    pg_dump: str = Field(..., examples=["/usr/lib/postgresql/14/bin/pg_dump"])
    pg_restore: str = Field(..., examples=["/usr/lib/postgresql/14/bin/pg_restore"])
    pg_version: str = Field(..., examples=["14.9"])
    pg_version_num: int = Field(..., examples=[140009])
    source: str = Field(..., description="Discovery strategy: pg_config_env, path_psql or path_pg_config")


class ToolsetErrorResponse(BaseModel):
    """Discovery failure."""
    error: str = Field(..., examples=["AmbiguousConfigurationError"])
    detail: str
    candidates: List[str] = Field(default_factory=list)
    versions: Dict[str, str] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(..., examples=["healthy"])
    timestamp: str
    version: str = Field(..., examples=["0.1.0"])
