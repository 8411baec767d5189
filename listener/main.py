"""
Webhook listener - receives source-control webhooks and queues build and sync jobs.

Features:
- Source address allow-listing
- Event classification and queue routing
- Structured logging with request ids
- Prometheus metrics
- Health checks (liveness and readiness)
"""
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app
from .config import get_settings
from .logging import setup_logging, get_logger
from .api.router import router
from .core.service import create_listener
from .middleware import RequestIdMiddleware, MetricsMiddleware, ErrorHandlerMiddleware
from .metrics import Metrics
from .health import HealthChecker

VERSION = "0.1.0"

settings = get_settings()

setup_logging(json_output=settings.LOG_JSON, level=settings.LOG_LEVEL)
logger = get_logger()

metrics = Metrics(service_name="listener", version=VERSION)

# Fails fast on a malformed allow-list
listener = create_listener(settings, metrics)

health_checker = HealthChecker(listener.queue, service_name="listener", version=VERSION)

app = FastAPI(
    title="Webhook Listener",
    version=VERSION,
    description="Receives source-control webhooks and dispatches build and sync jobs",
)
app.state.settings = settings
app.state.listener = listener

# Last added runs first: request id, then metrics, then the error handler
app.add_middleware(ErrorHandlerMiddleware)
app.add_middleware(MetricsMiddleware, metrics=metrics)
app.add_middleware(RequestIdMiddleware)

app.include_router(router)

metrics_app = make_asgi_app(registry=metrics.registry)
app.mount("/metrics", metrics_app)


@app.get("/health")
async def health():
    """Liveness probe."""
    logger.debug("health_check_liveness")
    return health_checker.liveness()


@app.get("/health/ready")
async def health_ready():
    """
    Readiness probe.

    Returns:
        200: Service can enqueue jobs
        503: Queue backend is unreachable or memory is exhausted
    """
    logger.debug("health_check_readiness")
    result = await health_checker.readiness()
    status_code = 200 if result["status"] == "ready" else 503
    return JSONResponse(result, status_code=status_code)


@app.on_event("startup")
async def startup_event():
    logger.info(
        "service_starting",
        version=VERSION,
        env=settings.ENV,
        queue_adapter=settings.QUEUE_ADAPTER,
        ip_validation=settings.IP_VALIDATION,
        valid_ips=len(listener.config.valid_ips),
    )


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("service_stopping")
    await listener.queue.close()
    metrics.app_up.labels(service="listener", version=VERSION).set(0)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "listener.main:app",
        host="0.0.0.0",
        port=settings.SERVICE_PORT,
    )
