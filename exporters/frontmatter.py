"""YAML frontmatter for exported documents."""

from typing import Any, Dict

import yaml

from models import OutputDocument, PageRecord, compact_id


class QuotedStr(str):
    """A string value that is always emitted double-quoted."""
    pass


class FrontmatterDumper(yaml.SafeDumper):
    """
    SafeDumper that indents block sequences under their key.

    Values wrapped in ``QuotedStr`` use the double-quoted style, which escapes
    ``"`` and ``\\``; keys stay plain.
    """

    def increase_indent(self, flow=False, indentless=False):
        return super().increase_indent(flow, False)


def _represent_quoted_str(dumper: yaml.SafeDumper, value: QuotedStr) -> yaml.ScalarNode:
    return dumper.represent_scalar('tag:yaml.org,2002:str', str(value), style='"')


FrontmatterDumper.add_representer(QuotedStr, _represent_quoted_str)


def build_frontmatter(record: PageRecord, description: str) -> Dict[str, Any]:
    """
    Header fields for a page, in their published order.

    Root-level pages carry no ``category``/``parent`` and pages without
    ancestors carry no ``tags``.
    """
    page = record.page
    frontmatter: Dict[str, Any] = {
        'title': QuotedStr(page.title),
        'description': QuotedStr(description),
        'date': QuotedStr(page.last_edited_time),
        'notionId': QuotedStr(page.compact_id),
    }

    if record.parent_title:
        frontmatter['category'] = QuotedStr(record.parent_title)

    if record.tags:
        frontmatter['tags'] = [QuotedStr(tag) for tag in record.tags]

    if record.hierarchy:
        frontmatter['hierarchy'] = [QuotedStr(title) for title in record.hierarchy]

    if record.parent_id:
        frontmatter['parent'] = QuotedStr(compact_id(record.parent_id))

    frontmatter['level'] = record.level
    return frontmatter


def dump_frontmatter(frontmatter: Dict[str, Any]) -> str:
    yaml_str = yaml.dump(
        frontmatter,
        Dumper=FrontmatterDumper,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
        width=4096
    )
    return f"---\n{yaml_str}---\n"


def render_document(document: OutputDocument) -> str:
    return f"{dump_frontmatter(document.frontmatter)}\n{document.body}"


__all__ = [
    'FrontmatterDumper',
    'QuotedStr',
    'build_frontmatter',
    'dump_frontmatter',
    'render_document'
]
