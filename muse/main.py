import logging

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from muse.database import init_db
from muse.routers.candidates_router import router as candidates_router
from muse.routers.genre_router import router as genre_router
from muse.routers.health_router import router as health_router
from muse.routers.movie_router import router as movie_router
from muse.routers.pick_router import router as pick_router
from muse.utils.config import settings, validate_settings
from muse.utils.middleware.logger import LoggingMiddleware, setup_logging

setup_logging(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger("muse.main")

app = FastAPI(title="Muse API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)
app.add_middleware(LoggingMiddleware)

# Field names as clients send them, for readable validation messages
_FIELD_MESSAGES = {
    "sessionId": "Invalid session ID format.",
    "minDuration": "minDuration must be at least 60 minutes.",
    "maxDuration": "maxDuration must be at least 60 minutes.",
    "genreIds": "genreIds must be an array.",
}


def validation_message(errors) -> str:
    for error in errors:
        for part in error.get("loc", ()):
            if part == "genreIds" and error.get("type") != "list_type":
                continue
            if part in _FIELD_MESSAGES:
                return _FIELD_MESSAGES[part]
    if not errors:
        return "Invalid request."
    first = errors[0]
    location = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    return f"Invalid {location}: {first.get('msg')}" if location else f"Invalid request: {first.get('msg')}"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": validation_message(exc.errors())},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error."},
    )


@app.on_event("startup")
async def startup_event():
    validate_settings()
    init_db()
    logger.info("Muse API ready (%s)", settings.ENVIRONMENT)


app.include_router(health_router)
app.include_router(genre_router)
app.include_router(pick_router)
app.include_router(candidates_router)
app.include_router(movie_router)


def run() -> None:
    uvicorn.run("muse.main:app", host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    run()
