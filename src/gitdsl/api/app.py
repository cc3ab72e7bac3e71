"""FastAPI application instance for the Git DSL API."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..logging_utils import configure_logging
from ..serialize import DSLSerializer
from . import __version__
from .routes import router as api_router

configure_logging()

logger = logging.getLogger(__name__)

serializer = DSLSerializer()

app = FastAPI(
    title="Git DSL API",
    description=(
        "Snapshots of the files changed between two revisions of a local "
        "repository, and per-file text, structured, JSON patch and JSON "
        "diff tree views"
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report invalid requests in the same envelope as engine errors."""
    logger.info("Rejected request", extra={"path": request.url.path})
    return JSONResponse(
        status_code=422,
        content=serializer.create_error_envelope(
            "INVALID_REQUEST",
            "Request validation failed",
            {"errors": [{"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()]},
        ),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Return a consistent error envelope for uncaught exceptions."""
    logger.exception("Unhandled error", extra={"path": request.url.path})
    return JSONResponse(
        status_code=500,
        content=serializer.create_error_envelope(
            "INTERNAL_ERROR",
            f"Internal server error: {str(exc)}",
            {"exception_type": type(exc).__name__, "path": str(request.url.path)},
        ),
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000)
