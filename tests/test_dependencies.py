"""Tests for building collaborators from Settings."""

from unittest.mock import MagicMock

from healthbot.api.dependencies import build_messenger, build_webhook_handler
from healthbot.config import load_settings
from healthbot.infra.repositories.users_repository import PostgresUserRegistry
from healthbot.rag.remote import RemoteAnswerer
from healthbot.whatsapp.outbound import WasenderMessenger, WhapiMessenger

from .helpers import BASE_ENV


class TestBuildMessenger:
    def test_wasender_default(self):
        messenger = build_messenger(load_settings(BASE_ENV))

        assert isinstance(messenger, WasenderMessenger)
        assert messenger.base_url == "https://www.wasenderapi.com"
        assert messenger.timeout == 10.0

    def test_whapi(self):
        settings = load_settings({**BASE_ENV, "OUTBOUND_PROVIDER": "whapi", "WHAPI_API_KEY": "wk"})

        assert isinstance(build_messenger(settings), WhapiMessenger)


class TestBuildWebhookHandler:
    def test_in_process_pipeline_by_default(self):
        pipeline = MagicMock()

        handler = build_webhook_handler(load_settings(BASE_ENV), pipeline)

        assert handler.answerer is pipeline
        assert isinstance(handler.user_registry, PostgresUserRegistry)
        assert handler.non_medical_policy == "reject"

    def test_remote_answerer_when_url_set(self):
        settings = load_settings(
            {**BASE_ENV, "RAG_API_URL": "http://rag:8000/query", "USER_REGISTRY_ENABLED": "no"}
        )

        handler = build_webhook_handler(settings, MagicMock())

        assert isinstance(handler.answerer, RemoteAnswerer)
        assert handler.answerer.url == "http://rag:8000/query"
        assert handler.user_registry is None
