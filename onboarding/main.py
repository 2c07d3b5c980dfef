"""
Main FastAPI application
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import json
import time

from onboarding.config.settings import settings
from onboarding.routes import forms, notifications, submissions
from onboarding.services.api_client import OnboardingApiClient
from onboarding.utils.exceptions import OnboardingError


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events"""
    # Startup
    app.state.api_client = OnboardingApiClient.from_settings()
    print(f"🚀 {settings.APP_NAME} v{settings.VERSION} started (backend: {settings.API_BASE_URL})")
    yield
    # Shutdown
    await app.state.api_client.aclose()
    print("👋 Application shutdown")

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(OnboardingError)
async def onboarding_exception_handler(request: Request, exc: OnboardingError):
    print(f"❌ {exc.status_code} {type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "message": exc.message, "retryable": exc.retryable},
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Round-trip through json with default=str to handle non-serializable objects (e.g. ValueError)
    safe_errors = json.loads(json.dumps(exc.errors(), default=str))
    print(f"❌ 422 VALIDATION ERROR on {request.method} {request.url.path}")
    print(f"📋 ERRORS: {json.dumps(safe_errors, indent=2)}")
    return JSONResponse(status_code=422, content={"detail": safe_errors})

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time
    print(f"✅ {request.method} {request.url.path} - {response.status_code} ({duration:.2f}s)")
    return response

# Include routers
app.include_router(forms.router, prefix="/api")
app.include_router(submissions.router, prefix="/api")
app.include_router(notifications.router, prefix="/api")
app.include_router(notifications.ws_router)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "app": settings.APP_NAME,
        "version": settings.VERSION,
        "status": "running"
    }

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}
