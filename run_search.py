#!/usr/bin/env python
"""
Command-line client for rentsearch.
Use: python run_search.py search "2 bedroom downtown" --intent
Or:  python run_search.py --fixture listings.json search "pet friendly"
"""
import argparse
import json
import sys
from pathlib import Path
from typing import Iterable, Optional

from rentsearch import SearchOrchestrator, SearchResult
from rentsearch.client import InMemoryListingStore, SupabaseListingStore
from rentsearch.errors import ListingStoreError
from rentsearch.logging_setup import configure_logging
from rentsearch.pipeline import ListingIndexer


def build_store(fixture: Optional[Path]):
    if fixture:
        return InMemoryListingStore.from_json(fixture)
    return SupabaseListingStore()


def print_result(result: SearchResult) -> None:
    print(f"Query: {result.search_query} | strategy: {result.strategy or '-'} | results: {len(result.matches)}")
    if not result.succeeded:
        print(f"  error: {result.error}")
    if result.analyzed_query:
        print(f"  intent: {result.analyzed_query.model_dump(exclude_none=True)}")
    for idx, match in enumerate(result.matches, start=1):
        price = f"${match.price:,.0f}" if match.price is not None else "-"
        reasons = ", ".join(match.match_reasons) or "-"
        print(
            f"  {idx:02d}. {match.similarity:.3f} | {match.title} | {match.location or '-'} | "
            f"{price} | {reasons}"
        )


def cmd_search(args: argparse.Namespace) -> int:
    store = build_store(args.fixture)
    orchestrator = SearchOrchestrator(store)
    result = orchestrator.search(args.query, {
        "model": args.model,
        "limit": args.limit,
        "offset": args.offset,
        "min_similarity": args.min_similarity,
        "use_semantic_search": args.semantic,
        "analyze_intent": args.intent,
    })
    if args.json:
        print(json.dumps(result.to_payload(), indent=2))
    else:
        print_result(result)
    return 0 if result.succeeded else 1


def cmd_embed(args: argparse.Namespace) -> int:
    store = build_store(args.fixture)
    indexer = ListingIndexer(store)
    failures = 0
    for outcome in indexer.embed_listings(args.listing_ids):
        status = "ok" if outcome.success else f"failed: {outcome.error}"
        print(f"{outcome.listing_id}: {status}")
        failures += 0 if outcome.success else 1
    return 1 if failures else 0


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Search rental listings in natural language")
    parser.add_argument("--fixture", type=Path, help="JSON file of listings to search instead of Supabase")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    p_search = sub.add_parser("search", help="Run a search query")
    p_search.add_argument("query")
    p_search.add_argument("--limit", type=int, default=10)
    p_search.add_argument("--offset", type=int, default=0)
    p_search.add_argument("--min-similarity", type=float, default=0.3)
    p_search.add_argument("--semantic", action="store_true", help="Use embedding search")
    p_search.add_argument("--intent", action="store_true", help="Analyze query intent with the LLM")
    p_search.add_argument("--model", default=None, help="Chat model for intent analysis")
    p_search.add_argument("--json", action="store_true", help="Print the raw result as JSON")
    p_search.set_defaults(func=cmd_search)

    p_embed = sub.add_parser("embed", help="Generate embeddings for listings")
    p_embed.add_argument("listing_ids", nargs="+")
    p_embed.set_defaults(func=cmd_embed)

    args = parser.parse_args(list(argv) if argv is not None else None)
    configure_logging(level=args.log_level)

    try:
        return args.func(args)
    except ListingStoreError as e:
        print(f"Datastore unavailable: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
