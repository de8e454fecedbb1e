"""Writes one markdown document with frontmatter per discovered Notion page."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from models import EmitResult, OutputDocument, PageRecord
from converters import extract_description, render_bookmark_cards
from .frontmatter import build_frontmatter, render_document
from .slug_registry import SlugRegistry


class MarkdownExporter:
    """
    Exports page records to ``<content_dir>/<slug>.md``.

    For each record this:
    1. Fetches the page's block tree
    2. Converts it to markdown, downloading images
    3. Extracts the description from the plain markdown
    4. Optionally turns bookmark links into cards
    5. Builds the frontmatter header and assigns a slug from the run's registry
    6. Writes the file

    Failures are contained to the page: ``emit`` logs them and returns None.
    """

    def __init__(
        self,
        client,
        converter,
        slug_registry: SlugRegistry,
        content_dir: Path,
        description_length: int = 150,
        bookmark_cards: bool = False,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the exporter for one sync run.

        Args:
            client: Notion client providing ``get_block_tree``
            converter: MarkdownConverter for block rendering and images
            slug_registry: Registry owned by the current run
            content_dir: Output directory for markdown documents
            description_length: Maximum description length before truncation
            bookmark_cards: Render standalone bookmark links as card HTML
            logger: Logger instance
        """
        self.client = client
        self.converter = converter
        self.slug_registry = slug_registry
        self.content_dir = Path(content_dir)
        self.description_length = description_length
        self.bookmark_cards = bookmark_cards
        self.logger = logger or logging.getLogger('notion_markdown_sync.exporters.markdown_exporter')

        self.stats = {
            'pages_exported': 0,
            'pages_failed': 0,
            'bytes_written': 0
        }
        self.last_error: Optional[str] = None

    def emit(self, record: PageRecord) -> Optional[EmitResult]:
        """
        Export a single page.

        Returns:
            EmitResult with slug and file name, or None if the page failed
        """
        self.last_error = None
        category_info = f" [{record.parent_title}]" if record.parent_title else ""
        self.logger.info(f"Processing: {record.title}{category_info}")

        try:
            document = self.build_document(record)
            file_path = self.content_dir / document.file_name
            content = render_document(document)
            file_path.write_text(content, encoding='utf-8')
        except Exception as e:
            self.last_error = str(e)
            self.stats['pages_failed'] += 1
            self.logger.error(f"  Failed to process \"{record.title}\": {e}")
            self.logger.debug(f"Failure details for page {record.id}", exc_info=True)
            return None

        self.stats['pages_exported'] += 1
        self.stats['bytes_written'] += len(content.encode('utf-8'))
        self.logger.info(f"  Saved: {document.file_name}")

        return EmitResult(slug=document.slug, file_name=document.file_name)

    def build_document(self, record: PageRecord) -> OutputDocument:
        """
        Fetch, convert and describe a page.

        The slug is assigned last so a page that fails to convert does not
        consume a suffix.
        """
        blocks = self.client.get_block_tree(record.id)
        body = self.converter.convert(blocks, record.page.compact_id)
        description = extract_description(body, self.description_length)
        if self.bookmark_cards:
            body = render_bookmark_cards(body)

        frontmatter = build_frontmatter(record, description)
        slug = self.slug_registry.assign(record.title)

        return OutputDocument(slug=slug, frontmatter=frontmatter, body=body)

    def get_stats(self) -> Dict[str, Any]:
        return self.stats.copy()


__all__ = ['MarkdownExporter']
