import logging

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from cropcast import __version__
from cropcast.config import get_settings
from cropcast.rate_limit import limiter
from cropcast.routers import (
    auth_router,
    chat_router,
    crops_router,
    dashboard_router,
    farms_router,
    fields_router,
    functions_router,
    profile_router,
    reminders_router,
)
from cropcast.services.errors import FunctionError, function_error_handler

settings = get_settings()
logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger("cropcast")

FUNCTIONS_PREFIX = "/functions/"

app = FastAPI(
    title="CropCast API",
    description="Farm, field, crop and reminder storage with AI crop recommendations and chat",
    version=__version__,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(FunctionError, function_error_handler)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Handler routes answer malformed bodies in their own error shape."""
    if request.url.path.startswith(FUNCTIONS_PREFIX):
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})
    return await request_validation_exception_handler(request, exc)


# CORS (allow-all unless CORS_ORIGINS is set)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Client-Info", "Apikey"],
)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    """Set basic security headers for all API responses."""
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


app.include_router(auth_router)
app.include_router(profile_router)
app.include_router(farms_router)
app.include_router(fields_router)
app.include_router(crops_router)
app.include_router(reminders_router)
app.include_router(chat_router)
app.include_router(dashboard_router)
app.include_router(functions_router)

Instrumentator().instrument(app).expose(app, include_in_schema=False)


@app.get("/health")
def health_check():
    return {"status": "healthy"}


@app.get("/")
def root():
    """Root endpoint with API information."""
    return {
        "name": "CropCast API",
        "version": __version__,
        "docs": "/docs",
        "auth": {
            "signup": "/auth/signup",
            "login": "/auth/login"
        },
        "functions": {
            "crop_recommendation": "/functions/v1/crop-recommendation",
            "chat": "/functions/v1/cropcast-chat"
        }
    }
