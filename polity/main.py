import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from polity.core.database import create_client
from polity.core.settings import settings
from polity.domains.amendments.routes import router as amendments_router
from polity.domains.memberships.routes import router as memberships_router
from polity.domains.participants.routes import router as participants_router
from polity.domains.permissions.routes import router as permissions_router
from polity.domains.roles.routes import router as roles_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # Startup
    db = create_client()
    await db.connect()
    app.state.db = db
    logger.info("Database connected")
    yield
    # Shutdown
    await db.disconnect()


app = FastAPI(
    title="Polity API",
    description="Role-based permissions for groups, events, blogs and amendments",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(permissions_router, prefix="/api/v1")
app.include_router(roles_router, prefix="/api/v1")
app.include_router(amendments_router, prefix="/api/v1")
app.include_router(memberships_router, prefix="/api/v1")
app.include_router(participants_router, prefix="/api/v1")


@app.get("/")
async def root() -> dict[str, str]:
    return {"message": "Polity API is running"}


@app.get("/health")
async def health_check() -> dict[str, str]:
    return {"status": "healthy"}
