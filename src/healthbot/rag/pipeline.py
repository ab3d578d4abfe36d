"""In-process RAG: embed the question, fetch context chunks, complete."""

from typing import Protocol, Sequence

from healthbot.domain.results import AnswerResult, RetrievalError
from healthbot.observability.logging import get_logger
from healthbot.observability.redaction import safe_log_context
from healthbot.rag.vector_store import TOP_K

logger = get_logger(__name__)

FALLBACK_ANSWER = "Sorry, I could not generate an answer right now."

CONTEXT_SEPARATOR = "\n\n"


class Embedder(Protocol):
    def embed(self, text: str) -> list[float]: ...


class VectorSearch(Protocol):
    def query_texts(self, vector: Sequence[float], top_k: int = TOP_K) -> list[str]: ...


class Completer(Protocol):
    def complete(self, question: str, context: str) -> str | None: ...


class RagPipeline:
    def __init__(
        self,
        *,
        embedder: Embedder,
        vector_store: VectorSearch,
        completer: Completer,
        top_k: int = TOP_K,
    ) -> None:
        self.embedder = embedder
        self.vector_store = vector_store
        self.completer = completer
        self.top_k = top_k

    def retrieve(self, question: str) -> AnswerResult:
        """Answer `question` from the indexed documents.

        Raises:
            RetrievalError: If embedding, vector search or completion fails.
        """
        stage = "embedding"
        try:
            vector = self.embedder.embed(question)
            stage = "vector_search"
            texts = self.vector_store.query_texts(vector, top_k=self.top_k)
            stage = "completion"
            answer = self.completer.complete(question, CONTEXT_SEPARATOR.join(texts))
        except Exception as e:
            logger.error(
                "rag pipeline failed",
                extra={"extra_fields": safe_log_context(stage=stage, error_type=type(e).__name__)},
            )
            raise RetrievalError(f"{stage} failed: {type(e).__name__}") from e

        logger.info(
            "rag answer generated",
            extra={
                "extra_fields": safe_log_context(
                    chunks=len(texts),
                    answer_len=len(answer) if answer is not None else None,
                )
            },
        )

        if answer is None:
            return AnswerResult(text=FALLBACK_ANSWER)
        return AnswerResult(text=answer.strip())
