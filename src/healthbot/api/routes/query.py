"""RAG endpoint: POST {question} -> plain-text answer."""

from typing import Any

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel, StrictStr, ValidationError

from healthbot.domain.results import RetrievalError
from healthbot.observability.logging import get_logger
from healthbot.rag.pipeline import RagPipeline

router = APIRouter(tags=["rag"])

logger = get_logger(__name__)

EMPTY_ANSWER_TEXT = "Sorry, the AI model failed to generate a response."
FAILURE_TEXT = "Sorry, an internal error occurred while processing your request."


def _get_pipeline(request: Request) -> RagPipeline:
    return request.app.state.rag_pipeline


class QueryRequest(BaseModel):
    question: StrictStr | None = None


def _question_from(payload: Any) -> str:
    try:
        body = QueryRequest.model_validate(payload)
    except ValidationError:
        return ""
    return (body.question or "").strip()


@router.post("/query")
async def query(request: Request) -> Response:
    """Answer one question from the indexed documents.

    Returns:
        200 text/plain answer.
        400 if the body is not JSON or question is missing, blank or not a string.
        500 plain-text apology if retrieval fails or the answer is empty.
    """
    try:
        payload: Any = await request.json()
    except Exception:
        payload = None

    question = _question_from(payload)
    if not question:
        return JSONResponse(status_code=400, content={"error": "Missing question"})

    try:
        answer = await run_in_threadpool(_get_pipeline(request).retrieve, question)
    except RetrievalError:
        logger.exception("query failed")
        return PlainTextResponse(FAILURE_TEXT, status_code=500)

    if answer.is_empty:
        logger.error("query produced an empty answer")
        return PlainTextResponse(EMPTY_ANSWER_TEXT, status_code=500)

    return PlainTextResponse(answer.text)
