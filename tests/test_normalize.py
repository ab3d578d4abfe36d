"""Tests for gateway payload normalization (WasenderAPI + Whapi)."""

import pytest

from healthbot.whatsapp import wasender_adapter, whapi_adapter
from healthbot.whatsapp.normalize import detect_provider, normalize

from .helpers import GROUP_JID, SENDER_JID, wasender_payload, whapi_payload


class TestWasenderNormalize:
    def test_conversation_text(self):
        result = wasender_adapter.normalize(wasender_payload("  What is malaria?  "))

        assert result is not None
        assert result.provider == "wasender"
        assert result.sender_id == SENDER_JID
        assert result.text == "What is malaria?"
        assert result.display_name == "Ada"
        assert result.message_id == "MSG123456789"
        assert result.is_from_self is False
        assert result.is_group_chat is False

    def test_extended_text_message(self):
        payload = wasender_payload(None)
        payload["data"]["messages"]["message"] = {
            "extendedTextMessage": {"text": "fever since yesterday"}
        }

        assert wasender_adapter.normalize(payload).text == "fever since yesterday"

    def test_image_caption(self):
        payload = wasender_payload(None)
        payload["data"]["messages"]["message"] = {
            "imageMessage": {"url": "https://example.com/rash.jpg", "caption": "is this a rash?"}
        }

        assert wasender_adapter.normalize(payload).text == "is this a rash?"

    def test_conversation_wins_over_caption(self):
        payload = wasender_payload("first")
        payload["data"]["messages"]["message"]["imageMessage"] = {"caption": "second"}

        assert wasender_adapter.normalize(payload).text == "first"

    def test_empty_conversation_falls_through_to_extended_text(self):
        payload = wasender_payload("")
        payload["data"]["messages"]["message"]["extendedTextMessage"] = {"text": "cough"}

        assert wasender_adapter.normalize(payload).text == "cough"

    def test_whitespace_text_is_absent(self):
        assert wasender_adapter.normalize(wasender_payload("   ")).text is None

    def test_whitespace_conversation_wins_and_is_absent(self):
        payload = wasender_payload("   ")
        payload["data"]["messages"]["message"]["extendedTextMessage"] = {"text": "what is tb"}

        assert wasender_adapter.normalize(payload).text is None

    def test_sticker_has_no_text(self):
        payload = wasender_payload(None)
        payload["data"]["messages"]["message"] = {"stickerMessage": {"url": "x"}}

        result = wasender_adapter.normalize(payload)

        assert result is not None
        assert result.text is None

    def test_sender_falls_back_to_flat_remote_jid(self):
        payload = wasender_payload("hi", sender=None)
        payload["data"]["messages"]["remoteJid"] = SENDER_JID

        assert wasender_adapter.normalize(payload).sender_id == SENDER_JID

    def test_missing_sender_is_encoded_not_raised(self):
        result = wasender_adapter.normalize(wasender_payload("hi", sender=None))

        assert result is not None
        assert result.sender_id is None

    def test_from_me(self):
        assert wasender_adapter.normalize(wasender_payload("hi", from_me=True)).is_from_self

    def test_group_chat(self):
        assert wasender_adapter.normalize(wasender_payload("hi", sender=GROUP_JID)).is_group_chat

    def test_other_event_returns_none(self):
        assert wasender_adapter.normalize(wasender_payload("hi", event="messages.update")) is None

    @pytest.mark.parametrize(
        "data",
        [None, {}, {"messages": None}, {"messages": "text"}, {"messages": []}, "data"],
    )
    def test_missing_container_returns_none(self, data):
        assert wasender_adapter.normalize({"event": "messages.received", "data": data}) is None


class TestWhapiNormalize:
    def test_text_message(self):
        result = whapi_adapter.normalize(whapi_payload(" what is tb "))

        assert result is not None
        assert result.provider == "whapi"
        assert result.sender_id == SENDER_JID
        assert result.text == "what is tb"
        assert result.display_name == "Ada"
        assert result.message_id == "wamid.TEST01"

    def test_from_me(self):
        assert whapi_adapter.normalize(whapi_payload("hi", from_me=True)).is_from_self

    def test_non_text_message(self):
        assert whapi_adapter.normalize(whapi_payload(None)).text is None

    def test_only_first_message_is_used(self):
        payload = whapi_payload("first")
        payload["messages"].append({"chat_id": "other@s.whatsapp.net", "text": {"body": "second"}})

        assert whapi_adapter.normalize(payload).text == "first"

    @pytest.mark.parametrize(
        "event",
        [{"type": "statuses", "event": "post"}, {"type": "messages", "event": "delete"}, {}],
    )
    def test_other_events_return_none(self, event):
        payload = whapi_payload("hi")
        payload["event"] = event

        assert whapi_adapter.normalize(payload) is None

    def test_empty_messages_returns_none(self):
        payload = whapi_payload("hi")
        payload["messages"] = []

        assert whapi_adapter.normalize(payload) is None


class TestDispatch:
    def test_detect_provider(self):
        assert detect_provider(wasender_payload()) == "wasender"
        assert detect_provider(whapi_payload()) == "whapi"
        assert detect_provider({"foo": "bar"}) is None
        assert detect_provider(["not", "a", "dict"]) is None

    def test_normalize_routes_by_shape(self):
        assert normalize(wasender_payload("hi")).provider == "wasender"
        assert normalize(whapi_payload("hi")).provider == "whapi"

    @pytest.mark.parametrize("payload", [None, [], "text", 42, {"event": 7}])
    def test_unrecognized_payload_returns_none(self, payload):
        assert normalize(payload) is None
