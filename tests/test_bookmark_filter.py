"""Tests for the bookmark card markdown filter."""

import unittest

from converters.bookmark_filter import bookmark_domain, render_bookmark_card, render_bookmark_cards


class TestBookmarkFilter(unittest.TestCase):
    def test_domain_drops_www(self):
        self.assertEqual(bookmark_domain('https://www.example.com/a/b'), 'example.com')
        self.assertEqual(bookmark_domain('https://blog.example.com'), 'blog.example.com')

    def test_domain_of_unparsable_url(self):
        self.assertEqual(bookmark_domain('not a url'), 'not a url')

    def test_standalone_bookmark_becomes_card(self):
        """Test a bookmark-only line is replaced by card HTML."""
        markdown = 'Intro\n\n[bookmark](https://www.example.com/post)\n\nOutro\n'

        rendered = render_bookmark_cards(markdown)

        self.assertTrue(rendered.startswith('Intro\n\n<a href="https://www.example.com/post"'))
        self.assertIn('data-url="https://www.example.com/post"', rendered)
        self.assertIn('<span class="bookmark-domain">example.com</span>', rendered)
        self.assertIn('domain=example.com', rendered)
        self.assertTrue(rendered.endswith('</a>\n\nOutro\n'))

    def test_inline_bookmark_link_is_kept(self):
        """Test a bookmark link inside a sentence is left alone."""
        markdown = 'See [bookmark](https://example.com) for details.\n'
        self.assertEqual(render_bookmark_cards(markdown), markdown)

    def test_url_is_html_escaped(self):
        card = render_bookmark_card('https://example.com/?a=1&b="2"')
        self.assertIn('href="https://example.com/?a=1&amp;b=&quot;2&quot;"', card)


if __name__ == '__main__':
    unittest.main()
