"""Chat completion against an OpenAI-compatible endpoint (OpenRouter by default)."""

from typing import Any

from openai import OpenAI

SYSTEM_PROMPT = (
    "You are a careful medical information assistant. Answer the user's question "
    "using ONLY the provided context. If the context does not contain enough "
    "information, say so politely and suggest consulting a qualified healthcare "
    "professional. Never invent facts, never give a diagnosis, and never prescribe "
    "medication or doses. Keep a calm, professional tone and reply with the answer "
    "only, without extra explanation."
)


def build_user_turn(question: str, context: str) -> str:
    return f"Context:\n{context}\n\nQuestion: {question}"


class ChatCompleter:
    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str,
        client: Any = None,
    ) -> None:
        self.client = client if client is not None else OpenAI(api_key=api_key, base_url=base_url)
        self.model = model

    def complete(self, question: str, context: str) -> str | None:
        """Return the first choice's text, or None when the model returned nothing."""
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_user_turn(question, context)},
            ],
        )
        choices = getattr(response, "choices", None) or []
        if not choices:
            return None
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        return content if isinstance(content, str) else None
