"""Render Notion block JSON to Markdown text."""

import logging
import re
from typing import Any, Dict, List, Optional

logger = logging.getLogger('notion_markdown_sync.converters.block_renderer')

LIST_BLOCK_TYPES = ('bulleted_list_item', 'numbered_list_item', 'to_do')
# Containers whose children are rendered in place of the block itself.
TRANSPARENT_BLOCK_TYPES = ('column_list', 'column', 'synced_block')
SKIPPED_BLOCK_TYPES = ('child_page', 'child_database', 'table_of_contents', 'breadcrumb', 'unsupported')
LINK_BLOCK_TYPES = ('video', 'file', 'pdf', 'audio')

INDENT = '  '

DEFAULT_IMAGE_ALT = 'image'
# Last path segment with an extension, before any query string.
_FILE_NAME = re.compile(r'[^/\\&?]+\.\w{3,4}(?=([?&].*$|$))')


def render_rich_text(rich_text: List[Dict[str, Any]]) -> str:
    """Render a Notion rich text array with its annotations."""
    parts = []
    for segment in rich_text or []:
        if segment.get('type') == 'equation':
            parts.append(f"${segment.get('equation', {}).get('expression', '')}$")
            continue

        text = segment.get('plain_text', '')
        if not text:
            continue

        annotations = segment.get('annotations') or {}
        if annotations.get('code'):
            text = f"`{text}`"
        if annotations.get('bold'):
            text = f"**{text}**"
        if annotations.get('italic'):
            text = f"_{text}_"
        if annotations.get('strikethrough'):
            text = f"~~{text}~~"

        href = segment.get('href')
        if href:
            text = f"[{text}]({href})"

        parts.append(text)
    return ''.join(parts)


def file_url(payload: Dict[str, Any]) -> str:
    """URL of a Notion file object, hosted or external."""
    source = payload.get(payload.get('type', ''), {}) or {}
    return source.get('url', '')


def image_alt_text(payload: Dict[str, Any], url: str) -> str:
    """
    Alt text for an image block.

    The caption's plain text is used without markup; an uncaptioned image
    falls back to its file name, then to ``image``. Square brackets are
    dropped so the alt text cannot close the image markup early.
    """
    alt = ''.join(segment.get('plain_text', '') for segment in payload.get('caption') or []).strip()
    if not alt:
        match = _FILE_NAME.search(url)
        alt = match.group(0) if match else DEFAULT_IMAGE_ALT
    return alt.replace('[', '').replace(']', '')


class BlockRenderer:
    """
    Turns a list of Notion blocks into a markdown document.

    Blocks are expected to carry their nested blocks under ``children``, as
    returned by ``NotionApiClient.get_block_tree``.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger('notion_markdown_sync.converters.block_renderer')

    def render(self, blocks: List[Dict[str, Any]]) -> str:
        markdown = self._render_blocks(blocks or [], depth=0).strip('\n')
        return markdown + '\n' if markdown else ''

    def _render_blocks(self, blocks: List[Dict[str, Any]], depth: int) -> str:
        output = ''
        previous_type = None
        number = 0

        for block in blocks:
            block_type = block.get('type')

            if block_type in TRANSPARENT_BLOCK_TYPES:
                inner = self._render_blocks(block.get('children', []), depth)
                if inner:
                    output += self._separator(output, previous_type, block_type) + inner
                    previous_type = block_type
                continue

            number = number + 1 if block_type == 'numbered_list_item' and previous_type == block_type else 1
            rendered = self._render_block(block, depth, number)
            if rendered is None:
                continue

            output += self._separator(output, previous_type, block_type) + rendered
            previous_type = block_type

        return output

    @staticmethod
    def _separator(output: str, previous_type: Optional[str], block_type: str) -> str:
        if not output:
            return ''
        if previous_type in LIST_BLOCK_TYPES and block_type in LIST_BLOCK_TYPES:
            return '\n'
        return '\n\n'

    def _render_block(self, block: Dict[str, Any], depth: int, number: int) -> Optional[str]:
        block_type = block.get('type')
        payload = block.get(block_type, {}) or {}
        prefix = INDENT * depth

        if block_type in SKIPPED_BLOCK_TYPES:
            return None

        if block_type == 'paragraph':
            text = render_rich_text(payload.get('rich_text'))
            return prefix + text + self._nested(block, depth + 1)

        if block_type in ('heading_1', 'heading_2', 'heading_3'):
            level = int(block_type[-1])
            heading = f"{prefix}{'#' * level} {render_rich_text(payload.get('rich_text'))}"
            if payload.get('is_toggleable') and block.get('children'):
                return heading + '\n\n' + self._render_blocks(block['children'], depth)
            return heading

        if block_type == 'bulleted_list_item':
            return f"{prefix}- {render_rich_text(payload.get('rich_text'))}" + self._nested(block, depth + 1, '\n')

        if block_type == 'numbered_list_item':
            return f"{prefix}{number}. {render_rich_text(payload.get('rich_text'))}" + self._nested(block, depth + 1, '\n')

        if block_type == 'to_do':
            mark = 'x' if payload.get('checked') else ' '
            return f"{prefix}- [{mark}] {render_rich_text(payload.get('rich_text'))}" + self._nested(block, depth + 1, '\n')

        if block_type == 'quote':
            text = render_rich_text(payload.get('rich_text'))
            nested = self._render_blocks(block.get('children', []), 0)
            return self._blockquote(text + ('\n' + nested if nested else ''), prefix)

        if block_type == 'callout':
            icon = payload.get('icon') or {}
            emoji = icon.get('emoji', '') if icon.get('type') == 'emoji' else ''
            text = render_rich_text(payload.get('rich_text'))
            nested = self._render_blocks(block.get('children', []), 0)
            body = f"{emoji} {text}".strip() + ('\n' + nested if nested else '')
            return self._blockquote(body, prefix)

        if block_type == 'toggle':
            summary = render_rich_text(payload.get('rich_text'))
            nested = self._render_blocks(block.get('children', []), 0)
            return f"{prefix}<details>\n{prefix}<summary>{summary}</summary>\n\n{nested}\n\n{prefix}</details>"

        if block_type == 'code':
            language = payload.get('language', '')
            if language == 'plain text':
                language = 'text'
            code = ''.join(segment.get('plain_text', '') for segment in payload.get('rich_text') or [])
            return f"{prefix}```{language}\n{code}\n{prefix}```"

        if block_type == 'equation':
            return f"{prefix}$$\n{payload.get('expression', '')}\n{prefix}$$"

        if block_type == 'divider':
            return f"{prefix}---"

        if block_type == 'image':
            url = file_url(payload)
            return f"{prefix}![{image_alt_text(payload, url)}]({url})"

        if block_type in LINK_BLOCK_TYPES:
            label = render_rich_text(payload.get('caption')) or payload.get('name') or block_type
            return f"{prefix}[{label}]({file_url(payload)})"

        if block_type in ('bookmark', 'link_preview'):
            return f"{prefix}[bookmark]({payload.get('url', '')})"

        if block_type == 'embed':
            return f"{prefix}[embed]({payload.get('url', '')})"

        if block_type == 'table':
            return self._render_table(block, prefix)

        self.logger.debug(f"Skipping unsupported block type '{block_type}' ({block.get('id')})")
        return None

    def _nested(self, block: Dict[str, Any], depth: int, separator: str = '\n\n') -> str:
        children = block.get('children')
        if not children:
            return ''
        return separator + self._render_blocks(children, depth)

    @staticmethod
    def _blockquote(text: str, prefix: str) -> str:
        return '\n'.join(f"{prefix}> {line}".rstrip() for line in text.split('\n'))

    @staticmethod
    def _render_table(block: Dict[str, Any], prefix: str) -> Optional[str]:
        rows = [
            [render_rich_text(cell).replace('|', '\\|') for cell in row.get('table_row', {}).get('cells', [])]
            for row in block.get('children', [])
            if row.get('type') == 'table_row'
        ]
        if not rows:
            return None

        width = max(len(row) for row in rows)
        rows = [row + [''] * (width - len(row)) for row in rows]

        lines = [f"{prefix}| " + ' | '.join(rows[0]) + ' |',
                 f"{prefix}| " + ' | '.join(['---'] * width) + ' |']
        lines.extend(f"{prefix}| " + ' | '.join(row) + ' |' for row in rows[1:])
        return '\n'.join(lines)


__all__ = ['BlockRenderer', 'file_url', 'image_alt_text', 'render_rich_text']
