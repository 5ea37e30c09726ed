import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from config import settings
from exceptions import (
    ChartCalculationError,
    EphemerisUnavailableError,
    InvalidInputError,
)
from routers import router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Vedic (sidereal) birth chart API: Dasha, Varga, Yoga and Gochara calculations",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, error: str, message: str, detail=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "message": message,
            "detail": detail
        }
    )


# Exception Handlers
@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    """Handle invalid coordinates, timezone or ephemeris data."""
    return _error(422, type(exc).__name__, str(exc))


@app.exception_handler(EphemerisUnavailableError)
async def ephemeris_unavailable_handler(request: Request, exc: EphemerisUnavailableError):
    """Handle ephemeris failures."""
    return _error(503, "EphemerisUnavailableError", str(exc))


@app.exception_handler(ChartCalculationError)
async def chart_calculation_error_handler(request: Request, exc: ChartCalculationError):
    """Handle chart calculation errors."""
    logger.error("Chart calculation failed on %s: %s", request.url.path, exc)
    return _error(500, "ChartCalculationError", str(exc))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors."""
    return _error(422, "ValidationError", "Request validation failed", jsonable_encoder(exc.errors()))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle all other unexpected exceptions."""
    logger.exception("Unhandled error on %s", request.url.path)
    return _error(500, "InternalServerError", "An unexpected error occurred")


app.include_router(router, prefix="/api/v1", tags=["API"])


# Root endpoints
@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "message": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}
