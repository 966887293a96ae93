"""
FastAPI Application Entry Point

Integrates:
  - WhatsApp webhook (verify + receive)
  - Event log lifecycle (seed, flush worker, sync loop, drain)
  - Health check

Run: uvicorn main:app --host 0.0.0.0 --port 3000

SIGTERM/SIGINT are handled by uvicorn, which runs the lifespan
shutdown: the event log is drained and synced before the process exits.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from config import Config
from infra import bootstrap_event_log, get_config
from transport.whatsapp import WhatsAppSender
from transport.whatsapp import router as whatsapp_router

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan: startup and shutdown handlers.
    """
    # Startup
    infra_config = get_config()
    event_log = bootstrap_event_log(infra_config)
    await event_log.startup()

    app.state.event_log = event_log
    app.state.whatsapp_sender = WhatsAppSender(
        events=event_log,
        access_token=Config.WHATSAPP_TOKEN,
        phone_number_id=Config.WABA_PHONE_ID,
        ventas_number_e164=Config.VENTAS_NUMBER_E164,
        api_version=Config.WHATSAPP_API_VERSION,
        base_url=Config.GRAPH_API_BASE_URL,
    )

    logger.info("=" * 60)
    logger.info(f"WABA webhook listening on :{Config.PORT}")
    logger.info(f"Environment: {Config.ENVIRONMENT}")
    logger.info(f"Event log: {infra_config.log_dir}")
    logger.info(f"Remote mirror: {event_log.mirror.name if event_log.mirror_enabled else 'disabled'}")
    logger.info("=" * 60)

    yield

    # Shutdown
    logger.info("WABA webhook shutting down...")
    await event_log.shutdown()


# Create FastAPI app
app = FastAPI(
    title="WABA Webhook",
    description="WhatsApp Business webhook with durable event logging",
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
app.include_router(whatsapp_router)


@app.get("/health", response_class=PlainTextResponse)
async def health():
    """Liveness check."""
    return "ok"


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=Config.PORT)
