"""Tests for frontmatter construction and serialization."""

import unittest

from exporters.frontmatter import build_frontmatter, dump_frontmatter, render_document
from models import AncestorContext, NotionPage, OutputDocument
from notion_fakes import read_frontmatter


def make_page(page_id, title, edited='2024-01-02T03:04:00.000Z'):
    return NotionPage(id=page_id, title=title, last_edited_time=edited)


class TestFrontmatter(unittest.TestCase):
    def setUp(self):
        root = AncestorContext()
        self.top = root.child_record(make_page('1111-aaaa', 'Getting Started'))
        self.nested = root.descend(self.top).child_record(make_page('2222-bbbb', 'Install'))

    def test_root_level_page(self):
        """Test a direct child of the root omits category, tags and parent."""
        frontmatter = build_frontmatter(self.top, 'Intro text')

        self.assertEqual(
            dump_frontmatter(frontmatter),
            '---\n'
            'title: "Getting Started"\n'
            'description: "Intro text"\n'
            'date: "2024-01-02T03:04:00.000Z"\n'
            'notionId: "1111aaaa"\n'
            'hierarchy:\n'
            '  - "Getting Started"\n'
            'level: 0\n'
            '---\n'
        )

    def test_nested_page_field_order(self):
        """Test every field is present for a nested page, in published order."""
        frontmatter = build_frontmatter(self.nested, 'How to install')

        self.assertEqual(
            list(frontmatter),
            ['title', 'description', 'date', 'notionId', 'category', 'tags', 'hierarchy', 'parent', 'level']
        )
        self.assertEqual(frontmatter['category'], 'Getting Started')
        self.assertEqual(frontmatter['tags'], ['Getting Started'])
        self.assertEqual(frontmatter['hierarchy'], ['Getting Started', 'Install'])
        self.assertEqual(frontmatter['parent'], '1111aaaa')
        self.assertEqual(frontmatter['level'], 1)

    def test_nested_page_serialization(self):
        text = dump_frontmatter(build_frontmatter(self.nested, 'How to install'))

        self.assertIn('category: "Getting Started"\n', text)
        self.assertIn('tags:\n  - "Getting Started"\nhierarchy:\n  - "Getting Started"\n  - "Install"\n', text)
        self.assertIn('parent: "1111aaaa"\nlevel: 1\n', text)

    def test_quotes_are_escaped(self):
        """Test titles containing double quotes stay valid YAML."""
        record = AncestorContext().child_record(make_page('3333', 'Say "hi" to YAML: a guide'))

        text = dump_frontmatter(build_frontmatter(record, 'Uses "quotes"'))

        self.assertIn('title: "Say \\"hi\\" to YAML: a guide"\n', text)
        self.assertEqual(read_frontmatter(text)['title'], 'Say "hi" to YAML: a guide')
        self.assertEqual(read_frontmatter(text)['description'], 'Uses "quotes"')

    def test_non_ascii_is_written_verbatim(self):
        record = AncestorContext().child_record(make_page('4444', '파이썬 입문'))

        text = dump_frontmatter(build_frontmatter(record, ''))

        self.assertIn('title: "파이썬 입문"\n', text)

    def test_render_and_read_frontmatter(self):
        """Test a rendered document separates header and body with a blank line."""
        frontmatter = build_frontmatter(self.nested, 'How to install')
        document = OutputDocument(slug='install', frontmatter=frontmatter, body='Body text\n')

        text = render_document(document)

        self.assertTrue(text.startswith('---\ntitle: "Install"\n'))
        self.assertTrue(text.endswith('level: 1\n---\n\nBody text\n'))
        self.assertEqual(read_frontmatter(text)['tags'], ['Getting Started'])

    def test_read_frontmatter_without_frontmatter(self):
        self.assertEqual(read_frontmatter('# Just markdown\n'), {})


if __name__ == '__main__':
    unittest.main()
