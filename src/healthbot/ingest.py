"""Load .docx documents into the vector index.

Usage:
    OPENAI_API_KEY=... PINECONE_API_KEY=... PINECONE_INDEX_NAME=... \
        python -m healthbot.ingest docs/health_rag_qa.docx [more.docx ...]

Each document is split into overlapping word windows; every chunk is embedded
and upserted with metadata {text, source, chunk_index}, the `text` field
being what the RAG pipeline reads back as context.
"""

from __future__ import annotations

import argparse
import os
import sys
import uuid
from pathlib import Path
from typing import Any, Protocol

from docx import Document

from healthbot.observability.correlation import correlation_scope
from healthbot.observability.logging import get_logger
from healthbot.observability.redaction import safe_log_context

logger = get_logger(__name__)

CHUNK_SIZE = 800
CHUNK_OVERLAP = 150


class Embedder(Protocol):
    def embed(self, text: str) -> list[float]: ...


class VectorSink(Protocol):
    def upsert(self, vectors: list[dict[str, Any]]) -> int: ...


def load_docx(path: str | Path) -> str:
    """Non-empty paragraphs joined by blank lines."""
    doc = Document(str(path))
    paragraphs = [p.text.strip() for p in doc.paragraphs if p.text and p.text.strip()]
    return "\n\n".join(paragraphs)


def split_text(text: str, chunk_size: int = CHUNK_SIZE, overlap: int = CHUNK_OVERLAP) -> list[str]:
    """Split into windows of `chunk_size` words, consecutive windows sharing `overlap` words."""
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    if not 0 <= overlap < chunk_size:
        raise ValueError("overlap must be >= 0 and smaller than chunk_size")

    words = text.split()
    chunks = []
    step = chunk_size - overlap
    for start in range(0, len(words), step):
        chunks.append(" ".join(words[start : start + chunk_size]))
        if start + chunk_size >= len(words):
            break
    return chunks


def ingest_file(path: str | Path, *, embedder: Embedder, sink: VectorSink) -> int:
    """Embed and upsert every chunk of one document. Returns the chunk count."""
    source = str(path)
    chunks = split_text(load_docx(path))

    vectors = [
        {
            "id": uuid.uuid4().hex,
            "values": embedder.embed(chunk),
            "metadata": {"text": chunk, "source": source, "chunk_index": i},
        }
        for i, chunk in enumerate(chunks)
    ]
    if vectors:
        sink.upsert(vectors)

    logger.info(
        "document ingested",
        extra={"extra_fields": safe_log_context(source=Path(source).name, chunks=len(vectors))},
    )
    return len(vectors)


def _build_clients() -> tuple[Embedder, VectorSink]:
    from healthbot.rag.embeddings import OpenAIEmbedder
    from healthbot.rag.vector_store import PineconeVectorStore

    missing = [
        name
        for name in ("OPENAI_API_KEY", "PINECONE_API_KEY", "PINECONE_INDEX_NAME")
        if not os.environ.get(name)
    ]
    if missing:
        raise RuntimeError(f"Missing required configuration: {', '.join(missing)}")

    embedder = OpenAIEmbedder(
        api_key=os.environ["OPENAI_API_KEY"],
        model=os.environ.get("EMBEDDING_MODEL", "text-embedding-3-small"),
    )
    sink = PineconeVectorStore(
        api_key=os.environ["PINECONE_API_KEY"],
        index_name=os.environ["PINECONE_INDEX_NAME"],
    )
    return embedder, sink


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Ingest .docx files into the vector index.")
    parser.add_argument("paths", nargs="+", help=".docx files to ingest")
    args = parser.parse_args(argv)

    paths = [Path(p) for p in args.paths]
    for path in paths:
        if not path.is_file() or path.suffix.lower() != ".docx":
            print(f"ERROR: not a .docx file: {path}")
            return 2

    try:
        embedder, sink = _build_clients()
    except RuntimeError as e:
        print(f"ERROR: {e}")
        return 1

    total = 0
    with correlation_scope():
        for path in paths:
            count = ingest_file(path, embedder=embedder, sink=sink)
            print(f"Ingested {count} chunks from {path}")
            total += count

    print(f"Done: {total} chunks from {len(paths)} file(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
