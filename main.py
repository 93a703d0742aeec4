#!/usr/bin/env python3
"""
Docs RAG - retrieval-augmented question answering over markdown docs.

Main entry point. The pipeline runs in two offline steps and one online
step:

    ingest  markdown docs -> chunks.json
    embed   chunks.json   -> vector store snapshot
    query / serve         question -> ranked excerpts (+ generated answer)
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from chunking.config import ChunkingServiceConfig
from chunking.models import ChunkingStrategy
from chunking.service import ChunkingService
from chunking.storage import CHUNKS_FILENAME
from common.exceptions import RAGError
from common.logging_config import get_logger, setup_logging
from retrieval.config import RetrievalConfig
from retrieval.context import assemble_context
from retrieval.service import build_retriever, clamp_top_k
from vector_store.embedder import HashEmbedder
from vector_store.ingest import EmbeddingService
from vector_store.models import StoreConfig
from vector_store.store import StoreProvider

# Module logger
logger = get_logger(__name__)


def cmd_ingest(args: argparse.Namespace) -> int:
    config = ChunkingServiceConfig.from_env()
    if args.docs_dir:
        config.docs_dir = args.docs_dir
    if args.data_dir:
        config.data_dir = args.data_dir
    if args.strategy:
        config.chunking.strategy = ChunkingStrategy(args.strategy)
    if args.chunk_size:
        config.chunking.chunk_size = args.chunk_size

    result, chunk_file = ChunkingService(config).ingest()
    stats = result.stats

    print("\n" + "=" * 60)
    print("INGESTION SUMMARY")
    print("=" * 60)
    print(f"Docs directory: {result.docs_dir}")
    print(f"Strategy: {result.config.strategy.value} "
          f"(target {result.config.effective_chunk_size}, min {result.config.min_chunk_chars} chars)")
    print(f"Files processed: {stats.files_processed} (skipped {stats.files_skipped})")
    print(f"Chunks: {stats.total_chunks}")
    if stats.total_chunks:
        print(f"Chunk chars: avg {stats.avg_chunk_chars:.0f}, "
              f"min {stats.min_chunk_chars}, max {stats.max_chunk_chars}")
    print(f"Output: {chunk_file}")
    return 0


def cmd_embed(args: argparse.Namespace) -> int:
    retrieval_config = RetrievalConfig.from_env()
    config = StoreConfig(
        snapshot_path=args.output or retrieval_config.snapshot_path,
        embedding_model=retrieval_config.embedding_model,
        ollama_base_url=retrieval_config.ollama_base_url,
        embedding_timeout_seconds=retrieval_config.embedding_timeout,
    )
    chunks_json = args.chunks or str(Path(ChunkingServiceConfig.from_env().data_dir) / CHUNKS_FILENAME)

    embedder = HashEmbedder() if args.hash else None
    if embedder is not None:
        logger.warning("Embedding with %s: vectors are not semantically meaningful", embedder.model)

    stats = EmbeddingService(config, embedder).embed_and_save(chunks_json)

    print("\n" + "=" * 60)
    print("EMBEDDING SUMMARY")
    print("=" * 60)
    print(f"Model: {stats.model_identifier}")
    print(f"Records: {stats.records_stored} (dimension {stats.embedding_dimension})")
    print(f"Time: {stats.total_time_seconds}s (embedding {stats.embedding_time_seconds}s)")
    print(f"Snapshot: {stats.snapshot_path}")
    return 0


def cmd_query(args: argparse.Namespace) -> int:
    retrieval_config = RetrievalConfig.from_env()
    provider = StoreProvider(retrieval_config.snapshot_path)
    embedder = None
    if args.hash:
        # Match the snapshot so the pseudo-vectors can be scored against it
        dimension = provider.get().embedding_dimension
        embedder = HashEmbedder(dimension) if dimension else HashEmbedder()
    retriever = build_retriever(retrieval_config, store_provider=provider, embedder=embedder)

    top_k = clamp_top_k(args.top_k, retrieval_config.default_top_k, retrieval_config.max_top_k)

    if args.answer:
        # Imported lazily: generation pulls in the HTTP stack.
        from generation.config import GenerationConfig
        from generation.models import ChatRequest
        from generation.service import ChatService

        service = ChatService(GenerationConfig.from_env(), retrieval_config, retriever)
        response = service.answer(ChatRequest(query=args.query, top_k=top_k))
        print(response.reply)
        print("\nSources:")
        for source in response.sources:
            print(f"  {source.label} ({source.confidence}% match) - {source.file}")
        return 0

    results = retriever.retrieve(args.query, top_k)
    if not results:
        print("No results (the vector store is empty).")
        return 0
    print(assemble_context(results, retrieval_config.excerpt_chars))
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    if args.app == "search":
        from retrieval.app import create_app
    else:
        from generation.app import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port, log_level="info")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Retrieval-augmented question answering over markdown documentation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s ingest --docs-dir docs
  %(prog)s embed
  %(prog)s query "How do robots perceive depth?" -k 4
  %(prog)s serve --app chat --port 3001
        """
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug output"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    ingest = sub.add_parser("ingest", help="Chunk markdown docs into chunks.json")
    ingest.add_argument("--docs-dir", help="Docs root (default: $RAG_DOCS_DIR or docs)")
    ingest.add_argument("--data-dir", help="Output directory (default: $RAG_DATA_DIR or data/rag)")
    ingest.add_argument(
        "--strategy",
        choices=[s.value for s in ChunkingStrategy],
        help="Chunking strategy (default: sentences)"
    )
    ingest.add_argument("--chunk-size", type=int, help="Target size in words or characters")
    ingest.set_defaults(func=cmd_ingest)

    embed = sub.add_parser("embed", help="Embed chunks.json into a vector store snapshot")
    embed.add_argument("--chunks", help="Chunk file (default: <data dir>/chunks.json)")
    embed.add_argument("-o", "--output", help="Snapshot path (default: $RAG_SNAPSHOT_PATH)")
    embed.add_argument(
        "--hash",
        action="store_true",
        help="Use the hash pseudo-embedder (offline testing only)"
    )
    embed.set_defaults(func=cmd_embed)

    query = sub.add_parser("query", help="Retrieve context for a question")
    query.add_argument("query", help="Question text")
    query.add_argument("-k", "--top-k", type=int, help="Number of results (default: $RAG_TOP_K or 4)")
    query.add_argument("--answer", action="store_true", help="Also generate an answer")
    query.add_argument("--hash", action="store_true", help="Embed the query with the hash pseudo-embedder")
    query.set_defaults(func=cmd_query)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--app", choices=["chat", "search"], default="chat")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=3001)
    serve.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    load_dotenv()
    args = build_parser().parse_args(argv)

    setup_logging(level=logging.DEBUG if args.verbose else os.environ.get("RAG_LOG_LEVEL", "INFO"))

    try:
        return args.func(args)
    except RAGError as e:
        logger.error(str(e))
        return 1
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Invalid input: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
