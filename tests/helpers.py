"""Test doubles and payload builders.

Regular classes/functions, importable by conftest.py and by test modules.
"""

from __future__ import annotations

from healthbot.domain.results import AnswerResult
from healthbot.whatsapp.outbound import DeliveryOutcome

SENDER_JID = "jid_test@s.whatsapp.net"
GROUP_JID = "120363000000000000@g.us"


class FakeMessenger:
    """Records sends; returns a configured outcome or raises."""

    def __init__(self, outcome_kind: str = "success", raises: Exception | None = None):
        self.sent: list[tuple[str, str]] = []
        self.outcome_kind = outcome_kind
        self.raises = raises

    def send(self, recipient_id: str, text: str) -> DeliveryOutcome:
        self.sent.append((recipient_id, text))
        if self.raises is not None:
            raise self.raises
        status = {"success": 200, "http_error": 404}.get(self.outcome_kind)
        return DeliveryOutcome(
            kind=self.outcome_kind,
            recipient_hash="hash",
            status_code=status,
        )


class FakeAnswerer:
    def __init__(self, answer: str = "", error: Exception | None = None):
        self.answer = answer
        self.error = error
        self.questions: list[str] = []

    def retrieve(self, question: str) -> AnswerResult:
        self.questions.append(question)
        if self.error is not None:
            raise self.error
        return AnswerResult(text=self.answer)


class FakeUserRegistry:
    def __init__(self, raises: Exception | None = None):
        self.phones: list[str] = []
        self.raises = raises

    def record_contact(self, phone: str) -> None:
        self.phones.append(phone)
        if self.raises is not None:
            raise self.raises


def wasender_payload(
    text: str | None = "hello",
    *,
    sender: str | None = SENDER_JID,
    from_me: bool = False,
    push_name: str | None = "Ada",
    event: str = "messages.received",
) -> dict:
    """Build a WasenderAPI messages.received body."""
    message = {"conversation": text} if text is not None else {}
    messages: dict = {
        "key": {"id": "MSG123456789", "fromMe": from_me},
        "message": message,
    }
    if sender is not None:
        messages["key"]["remoteJid"] = sender
    if push_name is not None:
        messages["pushName"] = push_name
    return {"event": event, "data": {"messages": messages}}


def whapi_payload(
    text: str | None = "hello",
    *,
    chat_id: str = SENDER_JID,
    from_me: bool = False,
    from_name: str | None = "Ada",
) -> dict:
    """Build a Whapi messages/post body."""
    message: dict = {"id": "wamid.TEST01", "from_me": from_me, "chat_id": chat_id, "type": "text"}
    if text is not None:
        message["text"] = {"body": text}
    if from_name is not None:
        message["from_name"] = from_name
    return {"event": {"type": "messages", "event": "post"}, "messages": [message]}


BASE_ENV = {
    "WASENDER_API_KEY": "wasender-key",
    "OPENAI_API_KEY": "sk-test",
    "OPENROUTER_API_KEY": "or-test",
    "PINECONE_API_KEY": "pc-test",
    "PINECONE_INDEX_NAME": "health-docs",
    "DATABASE_URL": "postgresql://u:p@localhost:5432/healthbot",
}
