"""Client for a RAG endpoint served elsewhere (POST {question} -> plain text)."""

import requests

from healthbot.domain.results import AnswerResult, RetrievalError
from healthbot.observability.correlation import CORRELATION_ID_HEADER, get_correlation_id
from healthbot.observability.logging import get_logger
from healthbot.observability.redaction import safe_log_context

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 60.0

MAX_ERROR_BODY = 2000


class RemoteAnswerer:
    def __init__(
        self,
        *,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        if not url:
            raise RuntimeError("Missing RAG endpoint url")
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def retrieve(self, question: str) -> AnswerResult:
        """POST the question; an empty 2xx body is a valid empty answer.

        Raises:
            RetrievalError: On transport failure or non-2xx status.
        """
        try:
            response = self.session.post(
                self.url,
                json={"question": question},
                headers={CORRELATION_ID_HEADER: get_correlation_id()},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(
                "rag endpoint unreachable",
                extra={"extra_fields": safe_log_context(error_type=type(e).__name__)},
            )
            raise RetrievalError(f"RAG endpoint unreachable: {type(e).__name__}") from e

        if not response.ok:
            body = response.text[:MAX_ERROR_BODY]
            logger.error(
                "rag endpoint returned error",
                extra={"extra_fields": safe_log_context(status_code=response.status_code)},
            )
            raise RetrievalError(
                f"RAG endpoint failed ({response.status_code}): {body}",
                status_code=response.status_code,
                body=body,
            )

        return AnswerResult(text=response.text.strip())
