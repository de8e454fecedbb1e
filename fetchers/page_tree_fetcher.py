"""Recursive discovery of the Notion page tree below a root page."""

import logging
from typing import List, Optional

from models import AncestorContext, NotionPage, PageRecord


class FetcherError(Exception):
    """Raised when the page tree cannot be discovered."""
    pass


class PageTreeFetcher:
    """
    Walks a Notion page tree depth-first and produces one PageRecord per page.

    Only ``child_page`` entries are retrieved and descended into; every other
    block type in a listing is ignored. Records come back in pre-order. Any
    failure aborts discovery: there is no partial tree.
    """

    PAGE_BLOCK_TYPE = 'child_page'

    def __init__(self, client, logger: Optional[logging.Logger] = None, max_depth: int = 50):
        self.client = client
        self.max_depth = max_depth
        self.logger = logger or logging.getLogger('notion_markdown_sync.fetchers.page_tree_fetcher')

    def discover(self, root_id: str) -> List[PageRecord]:
        """
        Discover every page below ``root_id``.

        Raises:
            FetcherError: If any listing or page retrieval fails
        """
        self.logger.info("Fetching pages recursively from root page...")
        records: List[PageRecord] = []
        self._walk(root_id, AncestorContext(), records)
        self.log_hierarchy(records)
        return records

    def _walk(self, block_id: str, context: AncestorContext, records: List[PageRecord]) -> None:
        if context.level > self.max_depth:
            raise FetcherError(
                f"Maximum depth {self.max_depth} exceeded below {block_id}; "
                f"page hierarchy too deep or cyclic"
            )

        try:
            children = self.client.list_children(block_id)
        except Exception as e:
            raise FetcherError(f"Failed to list children of {block_id}: {e}") from e

        for child in children:
            if child.get('type') != self.PAGE_BLOCK_TYPE:
                continue

            try:
                page = NotionPage.from_api(self.client.get_page(child['id']))
            except Exception as e:
                raise FetcherError(f"Failed to retrieve page {child.get('id')}: {e}") from e

            record = context.child_record(page)
            records.append(record)
            self.logger.debug(f"Discovered '{record.title}' (level {record.level})")

            self._walk(page.id, context.descend(record), records)

    def log_hierarchy(self, records: List[PageRecord]) -> None:
        """Log discovered pages as an indented outline."""
        self.logger.info("Page hierarchy:")
        for record in records:
            indent = '  ' * record.level
            category = f" [{record.parent_title}]" if record.parent_title else ""
            self.logger.info(f"{indent}- {record.title}{category} (level {record.level})")


__all__ = ['FetcherError', 'PageTreeFetcher']
