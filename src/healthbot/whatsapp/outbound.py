"""Outbound WhatsApp messaging via the chat gateway's send API.

One attempt per message, no retry. Failures come back as a DeliveryOutcome
instead of an exception so the webhook handler can decide what the user sees.

Security: NEVER log recipient_id or text. Only log hashes and lengths.
"""

import http.client
import json
import socket
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any, Literal

from healthbot.observability.logging import get_logger
from healthbot.observability.redaction import hash_identifier, safe_log_context

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 10.0

# Body kept on http_error outcomes, for diagnostics.
MAX_ERROR_BODY = 2000

DeliveryKind = Literal["success", "http_error", "transport_error"]

SESSION_HINT = "Check that the gateway session/channel is active and the API key is valid."
CONNECTIVITY_HINT = "Check network connectivity to the gateway."


class OutboundDeliveryError(Exception):
    """Message could not be delivered to the gateway (HTTP or transport)."""

    def __init__(self, outcome: "DeliveryOutcome") -> None:
        super().__init__(outcome.message)
        self.outcome = outcome


@dataclass(frozen=True)
class DeliveryOutcome:
    """Result of a single send attempt."""

    kind: DeliveryKind
    recipient_hash: str
    status_code: int | None = None
    body: str = ""
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.kind == "success"

    def raise_for_failure(self) -> None:
        if not self.ok:
            raise OutboundDeliveryError(self)


def _do_request(
    url: str, data: bytes, headers: dict[str, str], timeout: float
) -> tuple[int, str]:
    """POST and return (status, body). Raises urllib errors on non-2xx / network."""
    req = urllib.request.Request(url, data=data, headers=headers, method="POST")
    with urllib.request.urlopen(req, timeout=timeout) as resp:
        return resp.status, resp.read().decode("utf-8", errors="replace")


def _read_error_body(error: urllib.error.HTTPError) -> str:
    try:
        return error.read().decode("utf-8", errors="replace")[:MAX_ERROR_BODY]
    except Exception:
        return ""


def _is_timeout(error: BaseException) -> bool:
    if isinstance(error, (TimeoutError, socket.timeout)):
        return True
    reason = getattr(error, "reason", None)
    return isinstance(reason, (TimeoutError, socket.timeout))


class GatewayMessenger:
    """Base for gateway clients: one authenticated JSON POST per message."""

    provider = "gateway"

    def __init__(self, *, base_url: str, api_key: str, timeout: float = DEFAULT_TIMEOUT) -> None:
        if not base_url or not api_key:
            raise RuntimeError(f"Missing {self.provider} config: base_url and api_key required")
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    def _endpoint(self) -> str:
        raise NotImplementedError

    def _payload(self, recipient_id: str, text: str) -> dict[str, Any]:
        raise NotImplementedError

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    def send(self, recipient_id: str, text: str) -> DeliveryOutcome:
        """Send `text` to `recipient_id` and classify the result.

        Args:
            recipient_id: Chat address (JID or phone). NEVER logged.
            text: Message body. NEVER logged.
        """
        url = f"{self.base_url}{self._endpoint()}"
        data = json.dumps(self._payload(recipient_id, text)).encode("utf-8")
        recipient_hash = hash_identifier(recipient_id)

        log_ctx = safe_log_context(
            provider=self.provider,
            to_hash=recipient_hash,
            text_len=len(text),
        )
        logger.info("sending outbound message", extra={"extra_fields": log_ctx})

        try:
            status, _ = _do_request(url, data, self._headers(), self.timeout)
        except urllib.error.HTTPError as e:
            body = _read_error_body(e)
            outcome = DeliveryOutcome(
                kind="http_error",
                recipient_hash=recipient_hash,
                status_code=e.code,
                body=body,
                message=f"{self.provider} send failed: HTTP {e.code} - {body}. {SESSION_HINT}",
            )
        except (
            urllib.error.URLError,
            http.client.HTTPException,
            TimeoutError,
            OSError,
            ValueError,
        ) as e:
            # ValueError: malformed base_url rejected by urllib before connecting.
            what = "timed out" if _is_timeout(e) else f"connection failed ({type(e).__name__})"
            outcome = DeliveryOutcome(
                kind="transport_error",
                recipient_hash=recipient_hash,
                message=f"{self.provider} send {what}. {CONNECTIVITY_HINT}",
            )
        else:
            logger.info(
                "outbound message sent",
                extra={"extra_fields": safe_log_context(**log_ctx, status_code=status)},
            )
            return DeliveryOutcome(kind="success", recipient_hash=recipient_hash, status_code=status)

        logger.error(
            "outbound send failed",
            extra={
                "extra_fields": safe_log_context(
                    **log_ctx,
                    kind=outcome.kind,
                    status_code=outcome.status_code,
                )
            },
        )
        return outcome


class WasenderMessenger(GatewayMessenger):
    """WasenderAPI: POST /api/send-message {to, text}."""

    provider = "wasender"

    def _endpoint(self) -> str:
        return "/api/send-message"

    def _payload(self, recipient_id: str, text: str) -> dict[str, Any]:
        return {"to": recipient_id, "text": text}


class WhapiMessenger(GatewayMessenger):
    """Whapi.Cloud: POST /messages/text {to, body, typing_time}."""

    provider = "whapi"

    def __init__(self, *, typing_time: int = 0, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.typing_time = typing_time

    def _endpoint(self) -> str:
        return "/messages/text"

    def _payload(self, recipient_id: str, text: str) -> dict[str, Any]:
        return {"to": recipient_id, "body": text, "typing_time": self.typing_time}
