"""
Retrieval component for the docs-rag pipeline.

Embeds a query, ranks the vector store by cosine similarity and formats
the top results into a context block.
"""

__version__ = "1.0.0"

from .config import RetrievalConfig
from .context import assemble_context, confidence_percent, truncate_excerpt
from .models import QueryRequest, SearchHit, SearchResponse, SourceInfo
from .retriever import Retriever
from .service import RetrievalService, build_retriever, clamp_top_k, to_source_info

__all__ = [
    "__version__",
    "RetrievalConfig",
    "Retriever",
    "RetrievalService",
    "build_retriever",
    "clamp_top_k",
    "to_source_info",
    "assemble_context",
    "confidence_percent",
    "truncate_excerpt",
    "QueryRequest",
    "SearchHit",
    "SearchResponse",
    "SourceInfo",
]
