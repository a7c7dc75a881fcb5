"""
FastAPI application entry point with async lifespan.
"""
import uvicorn
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ecotrace.core.config import get_settings
from ecotrace.core.database import Database
from ecotrace.core.logger import configure_logging
from ecotrace.db.seed import seed_data
from ecotrace.routes import health, users, materials, credits, reports

settings = get_settings()
configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Async lifespan manager for startup and shutdown."""
    # Startup
    database = Database()
    await database.init()
    if settings.seed_demo_data:
        async with database.session_factory() as session:
            await seed_data(session, strict=settings.strict_transitions)
    app.state.database = database
    yield
    # Shutdown
    await database.close()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Material traceability and carbon credit lifecycle engine",
    lifespan=lifespan
)

# CORS middleware (for the role dashboards)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify exact origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routes
app.include_router(health.router)
app.include_router(users.router)
app.include_router(materials.router)
app.include_router(credits.router)
app.include_router(reports.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    uvicorn.run(
        app,
        host='0.0.0.0',
        port=settings.port,
        log_level=settings.log_level.lower()
    )
