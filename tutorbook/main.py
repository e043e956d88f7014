from contextlib import asynccontextmanager
from typing import AsyncIterator

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sentry_sdk.integrations.asyncio import AsyncioIntegration

from tutorbook import __version__
from tutorbook.database import DBMiddleware, db
from tutorbook.endpoints import bookings, realtime, tutors
from tutorbook.exceptions.bookings import BookingSubmissionException
from tutorbook.logger import get_logger
from tutorbook.redis import redis
from tutorbook.settings import settings


logger = get_logger(__name__)

if settings.sentry_dsn:
    logger.debug("initializing sentry")
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        integrations=[AsyncioIntegration()],
        release=f"tutorbook@{__version__}",
        environment=settings.sentry_environment,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("Starting tutorbook %s", __version__)
    yield
    logger.info("Shutting down tutorbook")
    await redis.aclose()
    await db.engine.dispose()


app = FastAPI(
    title="tutorbook",
    description="Browse the weekly availability of tutors and book one-hour sessions.",
    version=__version__,
    root_path=settings.root_path,
    root_path_in_servers=False,
    lifespan=lifespan,
)
app.add_middleware(DBMiddleware)

app.include_router(tutors.router, tags=["tutors"])
app.include_router(bookings.router, tags=["bookings"])
app.include_router(realtime.router, tags=["realtime"])


@app.exception_handler(BookingSubmissionException)
async def submission_error_handler(_: Request, exc: BookingSubmissionException) -> JSONResponse:
    return JSONResponse({"detail": exc.detail, "committed": exc.committed}, status_code=exc.status_code)

