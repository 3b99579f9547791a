"""
Command-line interface for Newsdesk.
"""
import sys
import json
import argparse
import logging
import asyncio
from pathlib import Path
from typing import Any, List, Optional

import aiohttp
import backoff

from newsdesk.client import NewsApiClient
from newsdesk.config import get_config
from newsdesk.core.article import Article
from newsdesk.core.errors import ServerError
from newsdesk.core.sanitize import (
    is_valid_keyword,
    is_valid_search_query,
    sanitize_keyword,
    sanitize_search_query,
)
from newsdesk.fetchers.news import FetchParams

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None):
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(description="Newsdesk - news aggregator client")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    search = subparsers.add_parser("search", help="Fetch ranked news")
    search.add_argument("--country", action="append", dest="countries",
                        help="Country code, repeatable (default: saved selection)")
    search.add_argument("--category", action="append", dest="categories",
                        help="Category code, repeatable (default: saved selection)")
    search.add_argument("--source", action="append", dest="sources", help="Source domain, repeatable")
    search.add_argument("--query", help="Free-text search query")
    search.add_argument("--date-range", help="Date range, e.g. 24h or week")
    search.add_argument("--retries", type=int, default=None,
                        help="Attempts on network failure (default: http.max_retries)")

    subparsers.add_parser("saved", help="List saved articles")
    save = subparsers.add_parser("save", help="Save an article from a JSON file")
    save.add_argument("path", help="Path to an article JSON file")
    unsave = subparsers.add_parser("unsave", help="Remove a saved article")
    unsave.add_argument("article_id")

    subparsers.add_parser("history", help="List reading history")
    read = subparsers.add_parser("read", help="Add an article from a JSON file to the reading history")
    read.add_argument("path", help="Path to an article JSON file")
    subparsers.add_parser("clear-history", help="Empty the reading history")

    check = subparsers.add_parser("check", help="Show how input would be sanitized")
    check.add_argument("--query", help="Search query to check")
    check.add_argument("--keyword", help="Tracked keyword to check")

    return parser.parse_args(argv)


def _emit(data: Any) -> None:
    json.dump(data, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


def _read_article(path: str) -> Article:
    with open(Path(path), 'r', encoding='utf-8') as f:
        return Article.from_dict(json.load(f))


def check_input(query: Optional[str], keyword: Optional[str]) -> dict:
    """Report the sanitized form and validity of a query and/or keyword."""
    report = {}
    if query is not None:
        report["query"] = {
            "sanitized": sanitize_search_query(query),
            "valid": is_valid_search_query(query),
        }
    if keyword is not None:
        report["keyword"] = {
            "sanitized": sanitize_keyword(keyword),
            "valid": is_valid_keyword(keyword),
        }
    return report


async def search(client: NewsApiClient, args) -> dict:
    """
    Run a news search, retrying network failures with exponential backoff.

    Server errors are not retried.
    """
    query = None
    if args.query is not None:
        if not is_valid_search_query(args.query):
            raise ValueError(f"Search query {args.query!r} is empty after sanitization")
        query = sanitize_search_query(args.query)

    params = FetchParams(
        countries=args.countries or client.get_selected_countries(),
        categories=args.categories or client.get_selected_categories(),
        search_query=query,
        date_range=args.date_range,
        sources=args.sources or client.get_selected_sources() or None,
    )
    max_tries = args.retries if args.retries is not None else get_config('http.max_retries', 3)
    if max_tries < 1:
        raise ValueError(f"Retries must be at least 1, got {max_tries}")

    fetch = backoff.on_exception(
        backoff.expo,
        (aiohttp.ClientError, asyncio.TimeoutError),
        max_tries=max_tries,
        logger=logger,
    )(client.fetch_news)
    return await fetch(params)


async def async_main(args) -> int:
    """
    Run one command.
    """
    if args.command == "check":
        _emit(check_input(args.query, args.keyword))
        return 0

    client = NewsApiClient.from_config()
    try:
        if args.command == "search":
            _emit(await search(client, args))
        elif args.command == "saved":
            _emit([article.to_dict() for article in await client.get_saved_articles()])
        elif args.command == "save":
            _emit((await client.save_article(_read_article(args.path))).to_dict())
        elif args.command == "unsave":
            _emit(await client.unsave_article(args.article_id))
        elif args.command == "history":
            _emit([article.to_dict() for article in await client.get_reading_history()])
        elif args.command == "read":
            _emit((await client.add_to_history(_read_article(args.path))).to_dict())
        elif args.command == "clear-history":
            await client.clear_history()
            logger.info("Reading history cleared")
    finally:
        await client.close()
    return 0


def main(argv: Optional[List[str]] = None):
    """
    Entry point for the command-line script.
    """
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)]
    )
    try:
        return asyncio.run(async_main(args))
    except KeyboardInterrupt:
        logger.info("Process interrupted by user")
        return 1
    except ServerError as e:
        logger.error(str(e))
        return 2
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.error(f"Could not reach the news service: {e!r}")
        return 2
    except (OSError, ValueError) as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
