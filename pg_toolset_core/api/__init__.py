"""
API module for pg-toolset-core.
"""

from .models import ToolsetResponse, HealthResponse
from .api import app

__all__ = [
    "ToolsetResponse",
    "HealthResponse",
    "app"
]
