"""API dependencies for FastAPI routes."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from smartreplies.db.session import get_db

# Type aliases for cleaner route signatures
DBSession = Annotated[AsyncSession, Depends(get_db)]
