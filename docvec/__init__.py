"""docvec package.

docvec stores text documents with their embeddings in PostgreSQL (pgvector)
and provides:
  1) Ingestion: text -> Ollama embedding -> stored document
  2) Similarity search ranked by vector distance

Entry points:
  - CLI: `docvec`
  - HTTP API: `docvec serve`
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
