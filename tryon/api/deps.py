"""
API Dependencies
Common dependencies for FastAPI routes (application context, session key).
"""

import uuid
from typing import Optional

from fastapi import Header, Request

from tryon.core.context import AppContext


def get_context(request: Request) -> AppContext:
    """Application context built at startup."""
    return request.app.state.context


def get_session_id(x_session_id: Optional[str] = Header(None)) -> str:
    """Session grouping key from X-Session-Id, or a fresh one."""
    return x_session_id or str(uuid.uuid4())
