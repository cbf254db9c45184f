import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rolemanager import __version__
from rolemanager.common.logger import setup_logger
from rolemanager.core.config import get_settings
from rolemanager.core.errors import HardStopError
from rolemanager.api.routers import roles, capabilities
from rolemanager.api.schemas.common import ErrorResponse

settings = get_settings()

setup_logger(
    "rolemanager",
    log_dir=settings.log_dir,
    level=settings.log_level,
    log_format=settings.log_format,
    file_logging=settings.file_logging,
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    from rolemanager.db.session import SessionLocal, init_db
    from rolemanager.db.seed import seed_default_roles

    init_db()
    db = SessionLocal()
    try:
        seed_default_roles(db)
        db.commit()
    finally:
        db.close()
    yield


app = FastAPI(
    title=settings.app_name,
    description="Inspect, edit and delete user roles and their capabilities",
    version=__version__,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.debug else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(HardStopError)
async def hard_stop_handler(request: Request, exc: HardStopError):
    logger.warning("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content=ErrorResponse(error=type(exc).__name__, detail=exc.message).model_dump(),
    )


# Include routers
app.include_router(roles.router, prefix="/api")
app.include_router(capabilities.router, prefix="/api")


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": __version__}


@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "version": __version__,
        "docs": "/docs" if settings.debug else None,
    }
