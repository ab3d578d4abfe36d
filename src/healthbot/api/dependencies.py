"""Build the collaborators the routes need from Settings.

Everything is constructed once per app; routes read it from app.state so
tests can pass doubles to create_app() instead.
"""

from healthbot.config import Settings
from healthbot.domain.webhook_handler import Answerer, WebhookHandler
from healthbot.infra.repositories.users_repository import PostgresUserRegistry
from healthbot.rag.completion import ChatCompleter
from healthbot.rag.embeddings import OpenAIEmbedder
from healthbot.rag.pipeline import RagPipeline
from healthbot.rag.remote import RemoteAnswerer
from healthbot.rag.vector_store import PineconeVectorStore
from healthbot.whatsapp.outbound import GatewayMessenger, WasenderMessenger, WhapiMessenger


def build_messenger(settings: Settings) -> GatewayMessenger:
    if settings.outbound_provider == "whapi":
        return WhapiMessenger(
            base_url=settings.whapi_base_url,
            api_key=settings.whapi_api_key,
            timeout=settings.outbound_timeout_seconds,
        )
    return WasenderMessenger(
        base_url=settings.wasender_base_url,
        api_key=settings.wasender_api_key,
        timeout=settings.outbound_timeout_seconds,
    )


def build_rag_pipeline(settings: Settings) -> RagPipeline:
    return RagPipeline(
        embedder=OpenAIEmbedder(api_key=settings.openai_api_key, model=settings.embedding_model),
        vector_store=PineconeVectorStore(
            api_key=settings.pinecone_api_key,
            index_name=settings.pinecone_index_name,
        ),
        completer=ChatCompleter(
            api_key=settings.openrouter_api_key,
            base_url=settings.openrouter_base_url,
            model=settings.completion_model,
        ),
    )


def build_webhook_handler(settings: Settings, rag_pipeline: RagPipeline) -> WebhookHandler:
    """Handler wired to the remote RAG endpoint when RAG_API_URL is set, else in-process."""
    answerer: Answerer = rag_pipeline
    if settings.rag_api_url:
        answerer = RemoteAnswerer(url=settings.rag_api_url, timeout=settings.rag_timeout_seconds)

    user_registry = None
    if settings.user_registry_enabled:
        user_registry = PostgresUserRegistry(settings.database_url)

    return WebhookHandler(
        messenger=build_messenger(settings),
        answerer=answerer,
        user_registry=user_registry,
        non_medical_policy=settings.non_medical_policy,
    )
