"""
FastAPI Application Entry Point

Integrates:
  - QR publisher (GET /qr)
  - Outbound gateway (POST /send)
  - Bridge sidecar event ingress (POST /session/events)
  - Health checks
  - Middleware for logging & error handling

Run: uvicorn main:app --host 0.0.0.0 --port 3000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from config import Config
from infra.bootstrap import InfraBootstrap, get_bootstrap
from transport.whatsapp.webhook import router as relay_router

# Setup logging
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan: startup and shutdown handlers.
    """
    # Startup
    infra = get_bootstrap()
    logger.info("=" * 60)
    logger.info("Group Relay starting up...")
    logger.info(f"Infrastructure: {infra!r}")
    logger.info(f"Environment: {Config.ENVIRONMENT}")
    if not Config.WEBHOOK_URL:
        logger.warning("WEBHOOK_URL not set; incoming group messages will only be logged")
    logger.info("=" * 60)

    await infra.startup()

    yield

    # Shutdown
    logger.info("Group Relay shutting down...")
    await infra.shutdown()


# Create FastAPI app
app = FastAPI(
    title="Group Relay API",
    description="Relay between chat groups and an automation webhook",
    version="1.0.0",
    lifespan=lifespan,
)


# Middleware for logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests."""
    logger.debug(f"{request.method} {request.url.path}")
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"Request error: {str(e)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )


# Include routers
app.include_router(relay_router)


# Health check endpoints
@app.get("/health/live")
async def health_live():
    """Live health check (Kubernetes liveness probe)."""
    return {"status": "alive"}


@app.get("/health/ready")
async def health_ready(infra: InfraBootstrap = Depends(get_bootstrap)):
    """Readiness health check: ready once the session reports ready."""
    session_status = infra.dispatcher.status
    if session_status == "ready":
        return {"status": "ready", "session": session_status}
    return {"status": "not_ready", "session": session_status}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Group Relay API",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "qr": "GET /qr",
            "send": "POST /send",
            "session_events": "POST /session/events",
            "health_live": "GET /health/live",
            "health_ready": "GET /health/ready",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=Config.PORT)
