"""Webhook orchestration: normalize, filter, classify, answer, reply.

Every path ends in a HandlingResult; the HTTP layer always answers 200 with
`result.to_response()`. Gateways retry on non-2xx, and a retry would repeat
user-facing replies.

Security: NEVER log sender ids or message text. Only hashes and lengths.
"""

from typing import Any, Protocol

from healthbot.domain.classifier import classify
from healthbot.domain.results import (
    AnswerResult,
    HandlingResult,
    HandlingState,
    RetrievalError,
)
from healthbot.observability.logging import get_logger
from healthbot.observability.redaction import hash_identifier, safe_log_context
from healthbot.whatsapp.models import NormalizedMessage, phone_from_jid
from healthbot.whatsapp.normalize import normalize
from healthbot.whatsapp.outbound import DeliveryOutcome
from healthbot.whatsapp.templates import render, welcome_message

logger = get_logger(__name__)


class Messenger(Protocol):
    def send(self, recipient_id: str, text: str) -> DeliveryOutcome: ...


class Answerer(Protocol):
    def retrieve(self, question: str) -> AnswerResult: ...


class UserRegistry(Protocol):
    def record_contact(self, phone: str) -> None: ...


class _ReplyGuard:
    """Per-event view of the messenger that remembers whether a reply was attempted."""

    def __init__(self, messenger: Messenger) -> None:
        self.messenger = messenger
        self.attempted = False

    def send(self, recipient_id: str, text: str) -> DeliveryOutcome:
        self.attempted = True
        return self.messenger.send(recipient_id, text)


def _ignored(reason: str) -> HandlingResult:
    return HandlingResult(state=HandlingState.IGNORED, status="ignored", reason=reason)


class WebhookHandler:
    """Turns one inbound webhook body into at most one reply.

    Args:
        messenger: Outbound gateway client.
        answerer: Retriever for medical questions (in-process or remote).
        user_registry: Optional store that records each sender once seen.
        non_medical_policy: "reject" replies with a fixed rejection text,
            "ignore" drops non-medical messages silently.
    """

    def __init__(
        self,
        *,
        messenger: Messenger,
        answerer: Answerer,
        user_registry: UserRegistry | None = None,
        non_medical_policy: str = "reject",
    ) -> None:
        if non_medical_policy not in ("reject", "ignore"):
            raise ValueError(f"Unknown non_medical_policy: {non_medical_policy}")
        self.messenger = messenger
        self.answerer = answerer
        self.user_registry = user_registry
        self.non_medical_policy = non_medical_policy

    def handle(self, payload: Any) -> HandlingResult:
        sender_id: str | None = None
        reply = _ReplyGuard(self.messenger)
        try:
            msg = normalize(payload)
            if msg is None:
                return self._finish(_ignored("not a message event"))
            if not msg.sender_id:
                return self._finish(_ignored("no sender"), msg)
            if msg.is_from_self:
                return self._finish(_ignored("self"), msg)
            if msg.is_group_chat:
                return self._finish(_ignored("group"), msg)
            if not msg.text:
                return self._finish(_ignored("empty or non-text"), msg)

            sender_id = msg.sender_id
            return self._finish(self._dispatch(reply, msg, msg.sender_id, msg.text), msg)
        except Exception:
            logger.exception(
                "webhook handling failed",
                extra={"extra_fields": safe_log_context(has_sender=sender_id is not None)},
            )
            # At most one reply per event: no notice once a send was attempted.
            notified = False
            if sender_id and not reply.attempted:
                notified = self._notify(reply, sender_id, "internal_error")
            return self._finish(
                HandlingResult(
                    state=HandlingState.INTERNAL_ERROR,
                    status="error",
                    reason="internal error",
                    notified=notified,
                )
            )

    def _dispatch(
        self, reply: _ReplyGuard, msg: NormalizedMessage, sender_id: str, text: str
    ) -> HandlingResult:
        self._record_contact(sender_id)

        intent = classify(text)

        if intent.is_greeting:
            outcome = reply.send(sender_id, welcome_message(msg.display_name))
            if not outcome.ok:
                return HandlingResult(
                    state=HandlingState.GREETING_REPLIED,
                    status="error",
                    reason=f"welcome message not delivered: {outcome.kind}",
                )
            return HandlingResult(
                state=HandlingState.GREETING_REPLIED,
                status="success",
                reason="welcome message sent",
            )

        if not intent.is_medical:
            if self.non_medical_policy == "ignore":
                return _ignored("non-medical")
            outcome = reply.send(sender_id, render("non_medical_rejection"))
            reason = "non-medical question, rejection sent"
            if not outcome.ok:
                reason = f"non-medical question, rejection not delivered: {outcome.kind}"
            return HandlingResult(
                state=HandlingState.REJECTION_REPLIED, status="ignored", reason=reason
            )

        return self._answer(reply, sender_id, text)

    def _answer(self, reply: _ReplyGuard, sender_id: str, question: str) -> HandlingResult:
        try:
            answer = self.answerer.retrieve(question)
        except RetrievalError as e:
            logger.error(
                "answer retrieval failed",
                extra={
                    "extra_fields": safe_log_context(
                        error_type=type(e).__name__,
                        status_code=e.status_code,
                    )
                },
            )
            notified = self._notify(reply, sender_id, "maintenance")
            return HandlingResult(
                state=HandlingState.UPSTREAM_FAILED,
                status="error",
                reason="answer retrieval failed",
                notified=notified,
            )

        if answer.is_empty:
            return HandlingResult(
                state=HandlingState.MEDICAL_ANSWER_EMPTY,
                status="ignored",
                reason="empty answer",
            )

        outcome = reply.send(sender_id, answer.text.strip())
        if not outcome.ok:
            return HandlingResult(
                state=HandlingState.MEDICAL_ANSWERED,
                status="error",
                reason=f"answer not delivered: {outcome.kind}",
            )
        return HandlingResult(
            state=HandlingState.MEDICAL_ANSWERED, status="success", reason="answer sent"
        )

    def _notify(self, reply: _ReplyGuard, sender_id: str, template_key: str) -> bool:
        """Best-effort error notice. Never raises; returns whether it was delivered."""
        try:
            outcome = reply.send(sender_id, render(template_key))
        except Exception:
            logger.exception(
                "error notice send raised",
                extra={"extra_fields": safe_log_context(template=template_key)},
            )
            return False
        if not outcome.ok:
            logger.warning(
                "error notice not delivered",
                extra={"extra_fields": safe_log_context(template=template_key, kind=outcome.kind)},
            )
        return outcome.ok

    def _record_contact(self, sender_id: str) -> None:
        if self.user_registry is None:
            return
        try:
            self.user_registry.record_contact(phone_from_jid(sender_id))
        except Exception:
            logger.warning(
                "user registry update failed",
                exc_info=True,
                extra={"extra_fields": safe_log_context(to_hash=hash_identifier(sender_id))},
            )

    def _finish(
        self, result: HandlingResult, msg: NormalizedMessage | None = None
    ) -> HandlingResult:
        log_ctx: dict[str, Any] = {
            "state": result.state.value,
            "status": result.status,
            "reason": result.reason,
        }
        if msg is not None:
            log_ctx.update(
                provider=msg.provider,
                message_id=msg.message_id,
                sender_hash=hash_identifier(msg.sender_id) if msg.sender_id else None,
                text_len=len(msg.text) if msg.text else 0,
            )
        if result.notified is not None:
            log_ctx["notified"] = result.notified
        logger.info("webhook handled", extra={"extra_fields": safe_log_context(**log_ctx)})
        return result
