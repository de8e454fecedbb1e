"""Converters package for Notion blocks to Markdown conversion."""

from .block_renderer import BlockRenderer, render_rich_text
from .bookmark_filter import render_bookmark_cards
from .markdown_converter import IMAGE_PATTERN, MarkdownConverter, extract_description

__all__ = [
    'BlockRenderer',
    'IMAGE_PATTERN',
    'MarkdownConverter',
    'extract_description',
    'render_bookmark_cards',
    'render_rich_text'
]
