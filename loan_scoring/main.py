from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.requests import Request
from loan_scoring.api.loan_routes import router as loan_router
from loan_scoring.api.model_routes import router as model_router
from loan_scoring.core.config import settings
from fastapi.exceptions import RequestValidationError
from fastapi import HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
import logging
import traceback

logging.basicConfig(level=logging.INFO)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Adds security headers to all API responses.

    OPTIONS requests are left to CORSMiddleware, which is registered last so
    it runs first and can answer preflights itself.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        if request.method != "OPTIONS":
            response.headers["X-Content-Type-Options"] = "nosniff"
            response.headers["X-Frame-Options"] = "DENY"
            response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
            response.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"

        return response


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Loan application validation, standardization and approval prediction",
    version="1.0.0"
)


# Global exception handlers to return structured JSON and log tracebacks
logger = logging.getLogger("server_exception_handler")


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    # Field-level failures carry a dict detail; everything else a plain message
    if isinstance(exc.detail, dict):
        error = {"code": "http_error", "status_code": exc.status_code, **exc.detail}
    else:
        error = {
            "code": "http_error",
            "message": str(exc.detail) if exc.detail else str(exc.status_code),
            "status_code": exc.status_code
        }
    logger.warning(f"HTTPException handled: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"error": error}, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Validation errors from FastAPI/Pydantic
    body = {
        "error": {
            "code": "validation_error",
            "message": "Request validation failed",
            "details": jsonable_encoder(exc.errors())
        }
    }
    logger.warning(f"Validation error: {exc.errors()}")
    return JSONResponse(status_code=422, content=body)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    # Catch-all for unexpected exceptions. Internal details stay in the logs.
    tb = traceback.format_exc()
    logger.error(f"Unhandled exception: {str(exc)}\n{tb}")
    body = {
        "error": {
            "code": "internal_server_error",
            "message": "An unexpected error occurred"
        }
    }
    return JSONResponse(status_code=500, content=body)


# Support comma-separated CLIENT_URL values (e.g. "http://localhost:3000,http://localhost:3001")
raw_origins = settings.CLIENT_URL or ""
allowed_origins = [o.strip() for o in raw_origins.split(",") if o.strip()]

if not allowed_origins or any("localhost" in origin for origin in allowed_origins):
    allowed_origins = list(set(allowed_origins + ["http://localhost:3000", "http://localhost:3001"]))

logging.getLogger(__name__).info(f"CORS allowed origins: {allowed_origins}")

# Middleware runs LIFO: security headers first, CORS last so it executes first
app.add_middleware(SecurityHeadersMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=[
        "Content-Type",
        "Authorization",
        "Accept",
        "Origin",
        "Accept-Language",
        "Content-Language",
        "X-Requested-With",
    ],
    expose_headers=["Content-Type"],
    max_age=3600,
)

app.include_router(loan_router)
app.include_router(model_router)

@app.get("/")
async def root():
    return {"message": "Loan Approval Scoring API is running!"}

@app.get("/health")
async def health_check():
    return {"status": "healthy", "message": "API is running"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
