#!/usr/bin/env python3
"""
Notion to Markdown Sync - CLI Entry Point

Exports every page below a Notion root page as a markdown document with
frontmatter, for a static site's content collection.
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from config_loader import ConfigLoader, ConfigurationError, get_nested
from fetchers import FetcherError
from logger import log_config, setup_logging
from notion_api_client import NotionApiClient
from orchestrator import SyncOrchestrator, SyncReport

__version__ = "1.0.0"

DEFAULT_CONFIG_FILE = 'config.yaml'


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for CLI."""
    parser = argparse.ArgumentParser(
        description="Sync a Notion page tree into markdown files with frontmatter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Sync using NOTION_TOKEN and NOTION_ROOT_PAGE_ID from the environment or .env
  notion-sync

  # Use a config file and write a JSON report
  notion-sync --config config.yaml --report sync_report.json

  # Show the page hierarchy without writing anything
  notion-sync --dry-run

  # Debug logging
  notion-sync -v
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '--config',
        type=str,
        help=f'Path to configuration YAML file (default: {DEFAULT_CONFIG_FILE} if present)'
    )

    parser.add_argument(
        '--env-file',
        type=str,
        default='.env',
        help='key=value file loaded into the environment first (default: .env)'
    )

    parser.add_argument(
        '--root-page-id',
        type=str,
        help='Notion root page ID (overrides NOTION_ROOT_PAGE_ID)'
    )

    parser.add_argument(
        '--output-dir',
        type=str,
        help='Directory for markdown documents'
    )

    parser.add_argument(
        '--images-dir',
        type=str,
        help='Directory for downloaded images'
    )

    parser.add_argument(
        '--bookmark-cards',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Render standalone bookmark links as bookmark card HTML'
    )

    parser.add_argument(
        '--report',
        type=str,
        help='Write a JSON sync report to this path'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Discover pages and print the hierarchy without writing files'
    )

    parser.add_argument(
        '--log-file',
        type=str,
        help='Also write logs to this file'
    )

    parser.add_argument(
        '--log-level',
        type=str.upper,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Explicit log level (overrides -v/-q)'
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Debug logging'
    )
    verbosity.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='Only warnings and errors'
    )

    return parser


def run_sync(config: dict, args: argparse.Namespace, logger: logging.Logger) -> int:
    """Execute the sync pipeline and report on it."""
    client = NotionApiClient.from_config(config)
    orchestrator = SyncOrchestrator(config, client, logger=logger, dry_run=args.dry_run)

    try:
        orchestrator.run()
    except FetcherError as e:
        logger.error(f"Sync failed: {e}")
        return 1

    report_generator = SyncReport(logger)
    report = report_generator.generate_report(
        orchestrator.result,
        asset_stats=orchestrator.asset_materializer.get_stats()
    )
    print("\n" + report_generator.format_console_report(report))

    report_path = get_nested(config, 'sync.report_path')
    if report_path:
        report_generator.export_json_report(report, report_path)

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    verbosity = 1 if args.verbose else -1 if args.quiet else 0
    logger = setup_logging(verbosity=verbosity, log_file=args.log_file, level=args.log_level)

    try:
        config_path = args.config
        if config_path is None and os.path.isfile(DEFAULT_CONFIG_FILE):
            config_path = DEFAULT_CONFIG_FILE

        config = ConfigLoader.load(config_path, env_file=args.env_file)
        config = ConfigLoader.merge_with_args(config, args)
        ConfigLoader.validate(config)
        log_config(config)
    except (ConfigurationError, FileNotFoundError) as e:
        logger.error(f"Configuration error: {e}")
        return 1

    try:
        return run_sync(config, args, logger)
    except KeyboardInterrupt:
        logger.error("Sync interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
