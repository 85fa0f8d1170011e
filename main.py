"""
CineTweet - movie and tweet store

CLI entry point for bootstrapping the store, ingesting tweets and
running the read queries.
"""

import argparse
import logging
import sys

from bson import json_util

from src.service import MovieService
from src.storage.connection import create_database
from src.utils.limits import parse_limit
import config.settings as settings


def setup_logging(log_level: str = "INFO"):
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stderr),
            logging.FileHandler(settings.LOG_FILE)
        ]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="CineTweet - movies and tweets in MongoDB",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create indexes, default blob and seed data
  python main.py bootstrap

  # Store tweets (one raw JSON payload per line) for a movie
  python main.py ingest --movie "Gravity" --file gravity_tweets.jsonl

  # Movies with at least 10000 votes and a rating of 8.0
  python main.py best --min-votes 10000 --min-rating 8.0 --limit 20

  # Tweets within 25 km of Berlin
  python main.py near --lat 52.52 --lng 13.40 --radius-km 25
        """
    )
    parser.add_argument("--uri", default=settings.MONGODB_URI, help="MongoDB connection string")
    parser.add_argument("--database", default=settings.MONGODB_DATABASE, help="Database name")
    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("bootstrap", help="Seed default blob and data, ensure indexes")

    ingest = sub.add_parser("ingest", help="Ingest tweets from a JSON lines file")
    ingest.add_argument("--movie", required=True, help="Title the tweets refer to")
    ingest.add_argument("--file", required=True, help="File with one raw tweet payload per line")

    movie = sub.add_parser("movie", help="Find a movie by exact title")
    movie.add_argument("title")

    best = sub.add_parser("best", help="Movies above vote and rating thresholds")
    best.add_argument("--min-votes", type=int, required=True)
    best.add_argument("--min-rating", type=float, required=True)
    best.add_argument("--limit", default="0")

    genre = sub.add_parser("genre", help="Movies having all given genres")
    genre.add_argument("genres", help=f"Genres separated by '{settings.GENRE_DELIMITER}'")
    genre.add_argument("--limit", default="0")

    prefix = sub.add_parser("prefix", help="Movies whose title starts with a prefix")
    prefix.add_argument("prefix")
    prefix.add_argument("--limit", default="0")

    suggest = sub.add_parser("suggest", help="Titles containing a fragment")
    suggest.add_argument("fragment")
    suggest.add_argument("--limit", default="0")

    near = sub.add_parser("near", help="Tweets within a radius")
    near.add_argument("--lat", type=float, required=True)
    near.add_argument("--lng", type=float, required=True)
    near.add_argument("--radius-km", type=float, required=True)

    recent = sub.add_parser("recent", help="Newest tweets")
    recent.add_argument("--limit", default="0")

    fts = sub.add_parser("fts", help="Full-text search over tweets")
    fts.add_argument("query")

    return parser


def run_command(service: MovieService, args: argparse.Namespace):
    """Execute one subcommand and return what should be printed."""
    if args.command == "bootstrap":
        service.bootstrap()
        return None
    if args.command == "ingest":
        with open(args.file, "r", encoding="utf-8") as f:
            # Raw payloads; each is validated in order so earlier tweets are kept
            events = [json_util.loads(line) for line in f if line.strip()]
        results = service.ingestor.ingest_all(args.movie, events)
        return {"ingested": len(results), "tweet_ids": [r.tweet_id for r in results]}
    if args.command == "movie":
        return service.movies.find_by_title(args.title)
    if args.command == "best":
        return list(service.movies.best_movies(args.min_votes, args.min_rating, parse_limit(args.limit)))
    if args.command == "genre":
        return list(service.movies.by_genres(args.genres, parse_limit(args.limit)))
    if args.command == "prefix":
        return list(service.movies.by_title_prefix(args.prefix, parse_limit(args.limit)))
    if args.command == "suggest":
        return list(service.movies.suggest(args.fragment, parse_limit(args.limit)))
    if args.command == "near":
        return list(service.tweets.near(args.lat, args.lng, args.radius_km))
    if args.command == "recent":
        return list(service.tweets.newest(parse_limit(args.limit)))
    if args.command == "fts":
        return service.tweets.full_text_search(args.query)
    raise ValueError(f"Unknown command: {args.command}")


def main():
    """Main CLI entry point."""
    args = build_parser().parse_args()

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    try:
        db = create_database(args.uri, args.database, settings.SERVER_SELECTION_TIMEOUT_MS)
        service = MovieService(db)
        output = run_command(service, args)
        if output is not None:
            print(json_util.dumps(output, indent=2))
        sys.exit(0)

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        sys.exit(1)

    except Exception as e:
        logger.error(f"Command '{args.command}' failed: {e}", exc_info=True)
        print(f"\n❌ {args.command} failed: {e}", file=sys.stderr)
        print(f"Check {settings.LOG_FILE} for details", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
