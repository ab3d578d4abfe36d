"""FastAPI application factory."""

from fastapi import FastAPI, Request, Response

from healthbot.config import Settings, load_settings
from healthbot.domain.webhook_handler import WebhookHandler
from healthbot.observability.correlation import CORRELATION_ID_HEADER, correlation_scope
from healthbot.observability.logging import get_logger
from healthbot.rag.pipeline import RagPipeline

from .dependencies import build_rag_pipeline, build_webhook_handler
from .routers import public
from .routes import query, webhooks_whatsapp

logger = get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    webhook_handler: WebhookHandler | None = None,
    rag_pipeline: RagPipeline | None = None,
) -> FastAPI:
    """Create the app.

    Collaborators not passed in are built from `settings`, which defaults to
    load_settings(); a missing required variable fails here, at startup.

    Run with: uvicorn --factory healthbot.api.factory:create_app
    """
    if webhook_handler is None or rag_pipeline is None:
        settings = settings or load_settings()
        if rag_pipeline is None:
            rag_pipeline = build_rag_pipeline(settings)
        if webhook_handler is None:
            webhook_handler = build_webhook_handler(settings, rag_pipeline)

    app = FastAPI(title="Healthbot", docs_url=None, redoc_url=None)
    app.state.webhook_handler = webhook_handler
    app.state.rag_pipeline = rag_pipeline

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next) -> Response:
        with correlation_scope(request.headers.get(CORRELATION_ID_HEADER)) as cid:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = cid
            return response

    app.include_router(public.router)
    app.include_router(webhooks_whatsapp.router)
    app.include_router(query.router)

    logger.info("app created")
    return app
