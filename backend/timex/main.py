from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from timex.api.routes import conflicts, generator, health
from timex.core.config import get_settings
from timex.core.exceptions import AppError
from timex.core.middleware import RequestSizeLimitMiddleware, RequestTimingMiddleware
from timex.db.bootstrap import ensure_schema
from timex.db.session import engine
from timex.services.time_model import load_configured_catalog

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    catalog = load_configured_catalog(settings.default_time_slots)
    ensure_schema(engine)
    logger.info("%s started with %s default time slots", settings.project_name, len(catalog))
    yield


async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "details": exc.details},
    )


app = FastAPI(title=settings.project_name, lifespan=lifespan)
app.add_exception_handler(AppError, app_error_handler)

app.add_middleware(RequestSizeLimitMiddleware, max_bytes=settings.max_request_size_bytes)
app.add_middleware(RequestTimingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix=settings.api_prefix, tags=["health"])
app.include_router(generator.router, prefix=f"{settings.api_prefix}/timetable", tags=["generator"])
app.include_router(conflicts.router, prefix=f"{settings.api_prefix}/timetable", tags=["conflicts"])
