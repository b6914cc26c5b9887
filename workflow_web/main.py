from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from workflow_web.core.config import settings
from workflow_web.core.database import init_database
from workflow_web.core.logging import setup_logging
from workflow_web.core.middleware import RequestIdMiddleware
from workflow_web.api import health
from workflow_web.api.app_definitions.routes import router as app_definitions_router
from workflow_web.api.content.routes import router as content_router
from workflow_web.api.tasks.routes import router as tasks_router

setup_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_database()
    logger.info("startup_complete", project=settings.PROJECT_NAME, version=settings.VERSION)
    yield


app = FastAPI(title=settings.PROJECT_NAME, version=settings.VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type", "X-Request-Id"],
    expose_headers=["X-Request-Id", "X-Response-Time"],
)
app.add_middleware(RequestIdMiddleware)

app.include_router(health.router)
app.include_router(tasks_router, prefix=settings.REST_PREFIX)
app.include_router(app_definitions_router, prefix=settings.REST_PREFIX)
app.include_router(content_router, prefix=settings.REST_PREFIX)
