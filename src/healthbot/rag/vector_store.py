"""Pinecone index access: similarity query and chunk upsert."""

from collections.abc import Sequence
from typing import Any

from pinecone import Pinecone

# Chunks retrieved per question.
TOP_K = 20

UPSERT_BATCH_SIZE = 100


def _field(obj: Any, name: str, default: Any = None) -> Any:
    # SDK responses expose attributes; plain dicts (REST/tests) expose keys.
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


class PineconeVectorStore:
    def __init__(
        self,
        *,
        api_key: str | None = None,
        index_name: str | None = None,
        index: Any = None,
    ) -> None:
        if index is None:
            if not api_key or not index_name:
                raise RuntimeError("Missing Pinecone config: api_key and index_name required")
            index = Pinecone(api_key=api_key).Index(index_name)
        self.index = index

    def query_texts(self, vector: Sequence[float], top_k: int = TOP_K) -> list[str]:
        """Return the `text` metadata of the nearest chunks, best match first."""
        results = self.index.query(vector=list(vector), top_k=top_k, include_metadata=True)
        texts = []
        for match in _field(results, "matches", None) or []:
            metadata = _field(match, "metadata", None) or {}
            text = metadata.get("text") if isinstance(metadata, dict) else None
            texts.append(text if isinstance(text, str) else "")
        return texts

    def upsert(self, vectors: Sequence[dict[str, Any]]) -> int:
        """Upsert {id, values, metadata} records in batches. Returns the count sent."""
        for start in range(0, len(vectors), UPSERT_BATCH_SIZE):
            self.index.upsert(vectors=list(vectors[start : start + UPSERT_BATCH_SIZE]))
        return len(vectors)
