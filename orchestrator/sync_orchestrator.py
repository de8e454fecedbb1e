"""
Sync orchestrator for a full Notion export run.

Sequences the run: clear previous documents → discover the page tree →
export every page one at a time → detect changes. Discovery failures end the
run; page failures do not.
"""

import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from models import PageRecord, PageStatus, SyncResult
from config_loader import get_nested
from converters import MarkdownConverter
from exporters import AssetMaterializer, MarkdownExporter, SlugRegistry
from fetchers import PageTreeFetcher
from logger import ProgressTracker, log_section
from .change_detector import GitChangeDetector

DOCUMENT_SUFFIX = '.md'


class SyncOrchestrator:
    """Central coordinator for one Notion → markdown sync."""

    def __init__(
        self,
        config: Dict[str, Any],
        client,
        logger: Optional[logging.Logger] = None,
        change_detector: Optional[GitChangeDetector] = None,
        asset_materializer: Optional[AssetMaterializer] = None,
        dry_run: bool = False
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Validated configuration dictionary
            client: Notion client (``list_children``, ``get_page``, ``get_block_tree``)
            logger: Optional logger instance
            change_detector: Optional override of the git based detector
            asset_materializer: Optional override of the image downloader
            dry_run: Discover and log the hierarchy without touching the output
        """
        self.config = config
        self.client = client
        self.logger = logger or logging.getLogger('notion_markdown_sync.orchestrator')
        self.dry_run = dry_run

        self.root_page_id = get_nested(config, 'notion.root_page_id')
        self.content_dir = Path(get_nested(config, 'export.content_directory'))
        self.images_dir = Path(get_nested(config, 'export.images_directory'))
        self.description_length = get_nested(config, 'export.description_length', 150)
        self.bookmark_cards = get_nested(config, 'export.bookmark_cards', False)
        self.detect_changes = get_nested(config, 'sync.detect_changes', True)

        self.change_detector = change_detector or GitChangeDetector(logger=self.logger)
        self.asset_materializer = asset_materializer or AssetMaterializer.from_config(config, logger=self.logger)
        self.fetcher = PageTreeFetcher(client, logger=self.logger)

        self.result = SyncResult()

    def run(self) -> bool:
        """
        Run a full sync.

        Returns:
            True if the output differs from the last committed state

        Raises:
            FetcherError: If the page tree cannot be discovered
        """
        log_section("Notion sync")
        start_time = time.time()
        self.result = SyncResult(dry_run=self.dry_run)

        if self.dry_run:
            records = self.fetcher.discover(self.root_page_id)
            self.result.pages_discovered = len(records)
            self.logger.info(f"Dry run: found {len(records)} pages, no files written")
            self.result.duration = time.time() - start_time
            return False

        self._prepare_directories()
        removed = self._clear_documents()
        self.logger.info(f"Cleared existing content ({removed} documents)")

        records = self.fetcher.discover(self.root_page_id)
        self.result.pages_discovered = len(records)
        self.logger.info(f"Found {len(records)} total pages")

        self._export_records(records)
        self.logger.info(f"Successfully processed {len(self.result.emitted)} pages")

        changed = self.change_detector.has_changes([self.content_dir, self.images_dir]) if self.detect_changes else True
        self.logger.info("Changes detected" if changed else "No changes detected")

        self.result.changed = changed
        self.result.duration = time.time() - start_time
        return changed

    def _prepare_directories(self) -> None:
        self.content_dir.mkdir(parents=True, exist_ok=True)
        self.images_dir.mkdir(parents=True, exist_ok=True)

    def _clear_documents(self) -> int:
        """Delete every markdown document from the previous run."""
        removed = 0
        for path in sorted(self.content_dir.iterdir()):
            if path.is_file() and path.suffix == DOCUMENT_SUFFIX:
                path.unlink()
                removed += 1
        return removed

    def _export_records(self, records: List[PageRecord]) -> None:
        """Export records strictly one after another with a fresh slug registry."""
        converter = MarkdownConverter(
            asset_materializer=self.asset_materializer,
            logger=self.logger
        )
        exporter = MarkdownExporter(
            client=self.client,
            converter=converter,
            slug_registry=SlugRegistry(),
            content_dir=self.content_dir,
            description_length=self.description_length,
            bookmark_cards=self.bookmark_cards,
            logger=self.logger
        )

        with ProgressTracker(total_items=len(records), item_type='pages', logger=self.logger) as tracker:
            for record in records:
                self.logger.debug(f"Page {tracker.position}: {record.title}")
                emitted = exporter.emit(record)
                tracker.increment(success=emitted is not None)

                if emitted is not None:
                    self.result.emitted.append(emitted)
                    self.result.statuses.append(PageStatus(
                        page_id=record.id,
                        page_title=record.title,
                        status='exported',
                        file_name=emitted.file_name
                    ))
                else:
                    self.result.statuses.append(PageStatus(
                        page_id=record.id,
                        page_title=record.title,
                        status='failed',
                        error_message=exporter.last_error
                    ))


__all__ = ['SyncOrchestrator']
