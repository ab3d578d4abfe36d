"""Request-scoped result types for answering and webhook handling."""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

ResponseStatus = Literal["success", "ignored", "error"]


class RetrievalError(Exception):
    """Answer retrieval failed (embedding, vector search, completion or RAG endpoint)."""

    def __init__(self, message: str, *, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


@dataclass(frozen=True)
class AnswerResult:
    """Answer text from a retriever. Empty is a valid outcome, not a failure."""

    text: str

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()


class HandlingState(str, Enum):
    IGNORED = "ignored"
    GREETING_REPLIED = "greeting_replied"
    REJECTION_REPLIED = "rejection_replied"
    MEDICAL_ANSWERED = "medical_answered"
    MEDICAL_ANSWER_EMPTY = "medical_answer_empty"
    UPSTREAM_FAILED = "upstream_failed"
    INTERNAL_ERROR = "internal_error"


@dataclass(frozen=True)
class HandlingResult:
    """Terminal outcome of one webhook event.

    `notified` is only meaningful for the failure states: whether the
    user-facing error notice reached the gateway.
    """

    state: HandlingState
    status: ResponseStatus
    reason: str
    notified: bool | None = None

    def to_response(self) -> dict[str, str]:
        return {"status": self.status, "reason": self.reason}
