from fastapi import FastAPI, WebSocket, WebSocketDisconnect, Response, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
import logging
import os
import time
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from . import pubsub
from .errors import WorkflowError
from .schemas import ErrorOut
from .routes import (
    documents,
    transitions,
    revisions,
    curation,
    reviews,
    statistics,
)

logger = logging.getLogger(__name__)

dsn = os.getenv("SENTRY_DSN")
if dsn:
    sentry_sdk.init(dsn=dsn, integrations=[FastApiIntegration()])

REQUEST_COUNT = Counter("request_count", "Total requests", ["method", "endpoint"])
REQUEST_LATENCY = Histogram(
    "request_latency_seconds", "Request latency", ["endpoint"]
)

app = FastAPI(title="UBrary Workflow API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv(
        "CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
    ).split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

limiter = Limiter(key_func=get_remote_address)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, lambda r, e: Response("Too Many Requests", status_code=429))
if os.getenv("TESTING") != "1":
    app.add_middleware(SlowAPIMiddleware)


@app.exception_handler(WorkflowError)
async def workflow_error_handler(request: Request, exc: WorkflowError):
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorOut(detail=exc.detail, error=exc.code, retryable=exc.retryable).model_dump(),
    )


@app.middleware("http")
async def record_metrics(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    endpoint = request.url.path
    REQUEST_COUNT.labels(request.method, endpoint).inc()
    REQUEST_LATENCY.labels(endpoint).observe(time.time() - start)
    return response

@app.get("/metrics")
def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

app.include_router(documents.router)
app.include_router(transitions.router)
app.include_router(revisions.router)
app.include_router(curation.router)
app.include_router(reviews.router)
app.include_router(statistics.router)


def audit_routes():
    from fastapi.routing import APIRoute
    from .auth import get_current_actor

    public_paths = {"/metrics"}
    for route in app.routes:
        if isinstance(route, APIRoute) and route.path.startswith("/api") and route.path not in public_paths:
            calls = [dep.call for dep in route.dependant.dependencies]
            if get_current_actor not in calls:
                raise RuntimeError(f"Route {route.path} missing authentication")


audit_routes()


@app.websocket("/ws/documents/{document_id}")
async def document_events(websocket: WebSocket, document_id: str):
    await websocket.accept()
    try:
        async for data in pubsub.iter_document_events(document_id):
            await websocket.send_text(data)
    except WebSocketDisconnect:
        logger.debug("Workflow event subscriber for %s disconnected", document_id)
