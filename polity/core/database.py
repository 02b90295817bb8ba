# polity/core/database.py
from typing import TYPE_CHECKING, Any

from fastapi import Request

from polity.core.settings import settings

if TYPE_CHECKING:
    from prisma import Prisma as DatabaseClient
else:
    DatabaseClient = Any


def create_client() -> "DatabaseClient":
    """
    Build the Prisma client used for the lifetime of the process.

    The client is created once in the application lifespan and handed to
    consumers through ``get_db``; nothing holds it at module level.
    """
    from prisma import Prisma

    if settings.DATABASE_URL:
        return Prisma(datasource={"url": settings.DATABASE_URL})
    return Prisma()


async def get_db(request: Request) -> "DatabaseClient":
    """Database dependency for FastAPI dependency injection."""
    return request.app.state.db
