"""Ingest .docx files into the Pinecone index used by the RAG pipeline.

Usage:
    OPENAI_API_KEY=... PINECONE_API_KEY=... PINECONE_INDEX_NAME=... \
        python scripts/ingest_docs.py src/data/health_rag_1000_qa.docx

Thin wrapper over `python -m healthbot.ingest`.
"""

from __future__ import annotations

import sys

from healthbot.ingest import main

if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
