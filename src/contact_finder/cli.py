"""CLI entrypoint for contact-finder."""

from __future__ import annotations

import argparse
import os
from collections.abc import Sequence

from .config import (
    DEFAULT_LEAD_DELAY,
    DEFAULT_MAX_CONTACTS,
    DEFAULT_PATH_DELAY,
    DEFAULT_QUERY_DELAY,
    DEFAULT_RESULTS_PER_QUERY,
    DiscoveryConfig,
)
from .errors import ConfigError
from .logging_utils import configure_logging, get_logger
from .pipeline import run_pipeline


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(
        description="Contact Finder - decision-maker discovery from search snippets and team pages."
    )
    source_group = parser.add_mutually_exclusive_group(required=False)
    source_group.add_argument(
        "--leads-file", help="CSV with business_name, address, website columns."
    )
    source_group.add_argument("--business-name", help="Run discovery for a single business.")
    parser.add_argument("--address", help="Location context for --business-name.")
    parser.add_argument("--website", help="Website for --business-name.")
    parser.add_argument("--serper-key", help="Serper key (or set SERPER_API_KEY).")
    parser.add_argument("--serpapi-key", help="SerpApi key (or set SERPAPI_KEY).")
    parser.add_argument("--firecrawl-key", help="Firecrawl key (or set FIRECRAWL_API_KEY).")
    parser.add_argument(
        "--no-page-fetch", action="store_true", help="Skip team/about page crawling."
    )
    parser.add_argument(
        "--keep-crawling",
        action="store_true",
        help="Keep trying team paths after one page produced contacts.",
    )
    parser.add_argument(
        "--prefer-page-source",
        action="store_true",
        help="Let page contacts win name collisions over search contacts.",
    )
    parser.add_argument("--first-names-file", help="Custom first-name list (one per line).")
    parser.add_argument("--output", default="contacts_output.json", help="Output JSON path.")
    parser.add_argument(
        "--max-contacts",
        type=int,
        default=DEFAULT_MAX_CONTACTS,
        help="Maximum contacts kept per lead.",
    )
    parser.add_argument(
        "--results-per-query",
        type=int,
        default=DEFAULT_RESULTS_PER_QUERY,
        help="Search results requested per query.",
    )
    parser.add_argument(
        "--query-delay",
        type=float,
        default=DEFAULT_QUERY_DELAY,
        help="Pause between search queries (seconds).",
    )
    parser.add_argument(
        "--path-delay",
        type=float,
        default=DEFAULT_PATH_DELAY,
        help="Pause between team page attempts (seconds).",
    )
    parser.add_argument(
        "--lead-delay",
        type=float,
        default=DEFAULT_LEAD_DELAY,
        help="Pause between leads (seconds).",
    )
    parser.add_argument("--no-progress", action="store_true", help="Disable tqdm progress bars.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse and pre-validate CLI input."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if not (args.leads_file or args.business_name):
        parser.error("Provide --leads-file or --business-name.")
    return args


def namespace_to_config(args: argparse.Namespace) -> DiscoveryConfig:
    """Convert CLI args to validated DiscoveryConfig."""
    logger = get_logger()
    serper_key = args.serper_key or os.getenv("SERPER_API_KEY")
    serpapi_key = args.serpapi_key or os.getenv("SERPAPI_KEY")
    firecrawl_key = args.firecrawl_key or os.getenv("FIRECRAWL_API_KEY")

    if not (serper_key or serpapi_key):
        logger.warning("No search API key found; falling back to DuckDuckGo HTML results.")
    if not args.no_page_fetch and not firecrawl_key:
        logger.info("No Firecrawl key found; team pages will be fetched directly.")

    return DiscoveryConfig(
        output=args.output,
        leads_file=args.leads_file,
        business_name=args.business_name,
        address=args.address,
        website=args.website,
        serper_key=serper_key,
        serpapi_key=serpapi_key,
        firecrawl_key=firecrawl_key,
        use_page_fetch=not args.no_page_fetch,
        first_names_file=args.first_names_file,
        max_contacts=args.max_contacts,
        results_per_query=args.results_per_query,
        query_delay=args.query_delay,
        path_delay=args.path_delay,
        lead_delay=args.lead_delay,
        stop_after_first_productive_page=not args.keep_crawling,
        prefer_search_source=not args.prefer_page_source,
        show_progress=not args.no_progress,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint."""
    args = parse_args(argv)
    configure_logging(args.verbose)
    logger = get_logger()
    try:
        config = namespace_to_config(args)
        report = run_pipeline(config, logger=logger)
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    logger.info(
        "Found %d contacts across %d leads; wrote %s",
        report.contacts_found,
        report.leads_processed,
        config.output,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
