from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .errors import IndexOutOfRange, InvalidInput
from .logging_setup import setup_logging
from .routers import tasks as tasks_router
from .settings import get_settings
from .state import AppState, get_app_state

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "tasks",
        "description": "Ordered task list: add, complete, edit, delete and drag-and-drop reordering.",
    },
]

_settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging when the server starts."""
    setup_logging(_settings.log_level)
    yield


app = FastAPI(
    title="Task List",
    description="Single-user ordered task list kept in memory.",
    version="0.1.0",
    openapi_tags=openapi_tags,
    lifespan=lifespan,
)

# Configure CORS based on settings (TASKLIST_CORS_ALLOW_ORIGINS), with '*' fallback
allow_all = (_settings.cors_allow_origins == ["*"]) or (len(_settings.cors_allow_origins) == 0)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if allow_all else _settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return a consistent JSON structure for request validation errors.

    Response format:
        {
            "error": "ValidationError",
            "detail": [... pydantic/fastapi error details ...],
            "message": "Request validation failed"
        }
    """
    return JSONResponse(
        status_code=422,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(InvalidInput)
async def invalid_input_handler(request: Request, exc: InvalidInput) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"error": "InvalidInput", "message": str(exc)},
    )


@app.exception_handler(IndexOutOfRange)
async def index_out_of_range_handler(request: Request, exc: IndexOutOfRange) -> JSONResponse:
    """
    A reorder request named a position that does not exist.

    This points at stale index bookkeeping on the client, so it is reported
    as a 400 rather than ignored.
    """
    return JSONResponse(
        status_code=400,
        content={
            "error": "IndexOutOfRange",
            "message": str(exc),
            "index": exc.index,
            "length": exc.length,
        },
    )


# PUBLIC_INTERFACE
@app.get("/", summary="Health Check", tags=["health"])
def health_check(state: AppState = Depends(get_app_state)):
    """
    Health check endpoint.

    Returns:
        A JSON object indicating service health and the number of tasks.
    """
    return {"message": "Healthy", "tasks": len(state.store)}


# Include routers
app.include_router(tasks_router.router)
