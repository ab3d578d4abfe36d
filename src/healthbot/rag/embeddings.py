"""Query/chunk embeddings via the OpenAI embeddings API."""

from typing import Any

from openai import OpenAI

DEFAULT_MODEL = "text-embedding-3-small"

# Must match the dimension the vector index was created with.
EMBEDDING_DIMENSIONS = 1024


class OpenAIEmbedder:
    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        dimensions: int = EMBEDDING_DIMENSIONS,
        client: Any = None,
    ) -> None:
        self.client = client if client is not None else OpenAI(api_key=api_key)
        self.model = model
        self.dimensions = dimensions

    def embed(self, text: str) -> list[float]:
        response = self.client.embeddings.create(
            input=text,
            model=self.model,
            encoding_format="float",
            dimensions=self.dimensions,
        )
        return list(response.data[0].embedding)
