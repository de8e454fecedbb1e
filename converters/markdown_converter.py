"""Converts a page's Notion blocks to markdown with images stored locally."""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from models import AssetRef
from .block_renderer import BlockRenderer

IMAGE_PATTERN = re.compile(r'!\[([^\]]*)\]\((https?://[^)]+)\)')

# Markup stripped when deriving a plain-text description.
_HEADING_MARKERS = re.compile(r'#{1,6}\s+')
_IMAGES = re.compile(r'!\[([^\]]*)\]\([^)]+\)')
_LINKS = re.compile(r'\[([^\]]+)\]\([^)]+\)')
_CODE = re.compile(r'`{1,3}[^`]*`{1,3}')
_EMPHASIS = re.compile(r'[*_~]')
_NEWLINES = re.compile(r'\n+')


def extract_description(markdown: str, max_length: int = 150) -> str:
    """
    Derive a plain-text summary from markdown.

    Text longer than ``max_length`` is cut and gets a trailing ``...``.
    """
    text = _HEADING_MARKERS.sub('', markdown)
    text = _IMAGES.sub('', text)
    text = _LINKS.sub(r'\1', text)
    text = _CODE.sub('', text)
    text = _EMPHASIS.sub('', text)
    text = _NEWLINES.sub(' ', text)
    text = text.strip()

    if len(text) <= max_length:
        return text

    return text[:max_length].strip() + '...'


class MarkdownConverter:
    """
    Renders Notion blocks to markdown and localizes embedded images.

    Image references are collected in one pass and substituted in a second,
    so replacing one snippet never shifts the matches still to be processed.
    A failed download leaves its reference untouched.
    """

    def __init__(
        self,
        asset_materializer,
        renderer: Optional[BlockRenderer] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.asset_materializer = asset_materializer
        self.renderer = renderer or BlockRenderer()
        self.logger = logger or logging.getLogger('notion_markdown_sync.converters.markdown_converter')

    def convert(self, blocks: List[Dict[str, Any]], owner_id: str) -> str:
        """
        Convert a page's blocks to markdown.

        Args:
            blocks: Notion blocks with nested ``children``
            owner_id: Compact id of the page that owns the images

        Returns:
            Markdown text
        """
        markdown = self.renderer.render(blocks)
        markdown, _ = self.materialize_images(markdown, owner_id)
        return markdown

    def materialize_images(self, markdown: str, owner_id: str) -> Tuple[str, List[AssetRef]]:
        """
        Download every remote image in ``markdown`` and point it at the local copy.

        Returns:
            Tuple of (rewritten markdown, asset references in textual order)
        """
        assets = []
        spans = []
        for index, match in enumerate(IMAGE_PATTERN.finditer(markdown), start=1):
            asset = AssetRef(
                url=match.group(2),
                alt_text=match.group(1),
                owner_id=owner_id,
                index=index,
                snippet=match.group(0)
            )
            try:
                asset.local_path = self.asset_materializer.fetch(asset.url, owner_id, index)
            except Exception as e:
                asset.error = str(e)
                self.logger.warning(f"Failed to download image {asset.url}: {e}")
            assets.append(asset)
            spans.append(match.span())

        # Substitute by position: identical snippets may have different outcomes.
        pieces = []
        cursor = 0
        for asset, (start, end) in zip(assets, spans):
            if asset.replacement is None:
                continue
            pieces.append(markdown[cursor:start])
            pieces.append(asset.replacement)
            cursor = end
        pieces.append(markdown[cursor:])
        markdown = ''.join(pieces)

        downloaded = sum(1 for asset in assets if asset.local_path)
        if assets:
            self.logger.debug(f"Localized {downloaded}/{len(assets)} image(s) for page {owner_id}")

        return markdown, assets


__all__ = ['IMAGE_PATTERN', 'MarkdownConverter', 'extract_description']
