"""CLI entry point: sync listings, print a feed, show stats, or serve the API."""

import argparse
import json
import logging
import sys
from pathlib import Path

from job_feed.config import AppConfig, load_config, validate_config
from job_feed.errors import ProfileNotFoundError
from job_feed.feed import FeedService, build_feed_service
from job_feed.jobs.sources import fetch_source_texts
from job_feed.utils.logging_config import setup_logging

logger = logging.getLogger("job_feed")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Job Feed - listing ingestion and personalized job matching",
    )
    parser.add_argument(
        "--config", default="config.yaml",
        help="Path to config file (default: config.yaml)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sync = sub.add_parser("sync", help="Parse, enrich and store listings")
    sync.add_argument(
        "--file", action="append", default=[],
        help="Read listing markdown from a local file instead of the configured sources (repeatable)",
    )

    feed = sub.add_parser("feed", help="Print the ranked feed for a user")
    feed.add_argument("--user-id", required=True)
    feed.add_argument("--json", action="store_true", help="Print raw JSON")

    sub.add_parser("stats", help="Print store statistics")

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    return parser.parse_args(argv)


def read_source_texts(config: AppConfig, files: list[str]) -> list[str]:
    if files:
        return [Path(f).read_text(encoding="utf-8") for f in files]
    return fetch_source_texts(config.ingest.sources, branch=config.ingest.branch)


def run_sync(service: FeedService, texts: list[str]) -> int:
    result = service.sync_listings(texts)
    print(f"Synced {result.synced_count} jobs "
          f"({result.listings_parsed} parsed, {result.duplicates_dropped} duplicates, "
          f"{result.embedded_count} embedded)")
    for error in result.errors:
        print(f"  Error: {error}", file=sys.stderr)
    return 0 if result.synced_count or not result.errors else 1


def print_feed(service: FeedService, user_id: str, as_json: bool = False) -> None:
    feed = service.get_feed(user_id)
    if as_json:
        print(json.dumps([job.to_dict() for job in feed], indent=2, default=str))
        return

    print(f"\n=== Feed for {user_id} ({len(feed)} jobs) ===")
    for i, scored in enumerate(feed, 1):
        job = scored.job
        print(f"#{i:>2} [{scored.chemistry}] {job.title} @ {job.company} - {job.location or 'n/a'}")
        for reason in scored.reasons:
            print(f"      - {reason}")
    print()


def print_stats(service: FeedService) -> None:
    """Print store statistics."""
    stats = service.store.get_stats()
    print("\n=== Job Feed Statistics ===")
    print(f"Total jobs: {stats['total_jobs']}")
    print(f"Active jobs: {stats['active_jobs']}")
    print(f"Jobs with embeddings: {stats['jobs_with_embeddings']}")
    print(f"Profiles: {stats['total_profiles']}")
    print(f"Swipes recorded: {stats['total_swipes']}")

    if stats.get("by_source"):
        print("\nJobs by source:")
        for source, count in stats["by_source"].items():
            print(f"  {source or 'unknown'}: {count}")

    if stats.get("swipes_by_action"):
        print("\nSwipes by action:")
        for action, count in stats["swipes_by_action"].items():
            print(f"  {action}: {count}")
    print()


def main(argv: list[str] | None = None):
    args = parse_args(argv)

    # Load config
    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(config.log_dir, config.log_level)

    for w in validate_config(config):
        logger.warning("Config: %s", w)

    service = build_feed_service(config)

    if args.command == "sync":
        texts = read_source_texts(config, args.file)
        sys.exit(run_sync(service, texts))

    if args.command == "feed":
        try:
            print_feed(service, args.user_id, as_json=args.json)
        except ProfileNotFoundError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        return

    if args.command == "stats":
        print_stats(service)
        return

    if args.command == "serve":
        import uvicorn

        from job_feed.web.app import create_app
        uvicorn.run(create_app(service), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
