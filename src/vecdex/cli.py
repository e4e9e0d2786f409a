from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import List, Sequence

from .config import index as index_cfg
from .corpus import SeedRecord, load_corpus, seed_records
from .errors import VecdexError
from .pipelines import IndexBuildPipeline, QueryPipeline, QueryResult
from .session import Session

logger = logging.getLogger(__name__)


def _non_negative_int(value: str) -> int:
    ivalue = int(value)
    if ivalue < 0:
        raise argparse.ArgumentTypeError("value must be a non-negative integer")
    return ivalue


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m vecdex",
        description="Build an in-memory embedding index from a corpus and query it.",
    )
    parser.add_argument(
        "queries",
        nargs="+",
        metavar="QUERY",
        help="Free-text queries to run against the index.",
    )
    parser.add_argument(
        "--corpus",
        type=Path,
        default=None,
        help="JSON corpus file (defaults to the built-in starter phrases).",
    )
    parser.add_argument(
        "-k",
        type=_non_negative_int,
        default=None,
        help=f"Neighbors per query (default: {index_cfg.DEFAULT_K}).",
    )
    return parser


def format_result(result: QueryResult) -> str:
    lines = [f"{result.query}:"]
    if not result.neighbors:
        lines.append("  (no results)")
    for rank, neighbor in enumerate(result.neighbors, start=1):
        doc = neighbor.document
        lines.append(f"  {rank}. {doc.title}  {doc.url}  {neighbor.similarity_score:.4f}")
    return "\n".join(lines)


async def run(corpus: Sequence[SeedRecord], queries: Sequence[str], k: int | None = None) -> List[QueryResult]:
    """Bring up a session, index ``corpus`` and answer ``queries`` in order."""

    async with Session() as session:
        await IndexBuildPipeline(session, corpus).run()
        pipeline = QueryPipeline(session, k=k)
        return [await pipeline.run(query) for query in queries]


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        corpus = load_corpus(args.corpus) if args.corpus else seed_records()
        results = asyncio.run(run(corpus, args.queries, args.k))
    except (VecdexError, ValueError, OSError) as exc:
        logger.error("%s", exc)
        return 1

    for result in results:
        print(format_result(result))
    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())
