import logging
import time

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from idea_processor import config
from idea_processor.api.routes import router
from idea_processor.errors import IdeaProcessorError, ValidationError
from idea_processor.pipeline import reset_pipeline
from idea_processor.registry import (
    InMemoryIdeaRegistry,
    SqlIdeaRegistry,
    get_registry,
    set_registry,
)

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="SaaS Idea Processor",
    version=config.SERVICE_VERSION,
)

# Middleware FIRST
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials="*" not in config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes AFTER middleware
app.include_router(router)


@app.exception_handler(IdeaProcessorError)
def handle_pipeline_error(request: Request, exc: IdeaProcessorError):
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))


@app.exception_handler(RequestValidationError)
def handle_request_validation(request: Request, exc: RequestValidationError):
    error = ValidationError(
        "Invalid request body",
        {"issues": jsonable_encoder(exc.errors())},
    )
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


@app.exception_handler(Exception)
def handle_unexpected(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": str(exc)},
    )


@app.on_event("startup")
def startup():
    registry = get_registry()
    if not isinstance(registry, SqlIdeaRegistry):
        return

    retries = 5
    delay = 2

    for attempt in range(retries):
        try:
            registry.create_tables()
            logger.info("Database connected")
            return
        except OperationalError:
            logger.warning("Waiting for database... (%d/%d)", attempt + 1, retries)
            time.sleep(delay)

    # Do not crash the app
    logger.error("Database not ready, running with the in-memory registry")
    set_registry(InMemoryIdeaRegistry())
    reset_pipeline()
