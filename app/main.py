from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from contextlib import asynccontextmanager

from app.utils.config import Settings
from app.utils.responses import CORS_HEADERS, error_response
from app.routers import upload

import logging
import time

import uvicorn

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:     %(message)s",
)


# Load configuration
settings = Settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown."""
    logging.info(f"🚀 Class Upload Service starting on {settings.host}:{settings.port}")
    logging.info(f"Environment: {settings.app_env}")
    logging.info(f"GitHub owner: {settings.github_user}")
    if not settings.github_token:
        logging.warning("⚠️ GITHUB_TOKEN is not set; uploads will be rejected")
    if not settings.google_script_url:
        logging.info("GOOGLE_SCRIPT_URL not set; answer keys will not be forwarded")
    logging.info("Routers registered: /api/upload")
    yield


app = FastAPI(title="Class Upload Service", lifespan=lifespan)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all incoming requests."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        logging.info(
            f"🌐 Incoming request: {request.method} {request.url.path} "
            f"(from {request.client.host if request.client else 'unknown'})"
        )

        try:
            response = await call_next(request)
            process_time = time.time() - start_time
            logging.info(
                f"✅ Request completed: {request.method} {request.url.path} "
                f"-> {response.status_code} ({process_time:.3f}s)"
            )
            return response
        except Exception as e:
            process_time = time.time() - start_time
            logging.error(
                f"❌ Request failed: {request.method} {request.url.path} "
                f"after {process_time:.3f}s - {type(e).__name__}: {e}"
            )
            raise


app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["*"],
)


# Health endpoint
@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}


# Debug endpoint
@app.get("/debug/config", tags=["debug"])
async def debug_config():
    """Returns the current application configuration with the token masked."""
    fresh = Settings()
    config = fresh.model_dump()
    config["github_token"] = "***" if fresh.github_token else ""
    return config


# Exception handlers
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logging.warning(
        f"⚠️ HTTP {exc.status_code} error for {request.method} {request.url.path}: {exc.detail}"
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=CORS_HEADERS,
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logging.error(
        f"❌ Unhandled exception for {request.method} {request.url.path}: {type(exc).__name__}",
        exc_info=exc,
    )
    return error_response("Internal Server Error")


app.include_router(upload.router)


def run():
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
