"""Tests for the document model's width handling and render cache."""

import unittest

from markupview.constants import ViewConstants
from markupview.model import DocumentModel
from markupview.renderer import MarkupRenderer, PlainTextRenderer


class CountingRenderer(MarkupRenderer):
    """Plain text renderer that records every call."""

    def __init__(self):
        self.calls = []
        self._inner = PlainTextRenderer()

    def render(self, markup, width):
        self.calls.append((markup, width))
        return self._inner.render(markup, width)


class TestDocumentModel(unittest.TestCase):

    def setUp(self):
        self.renderer = CountingRenderer()
        self.model = DocumentModel("one two three four", self.renderer)

    def test_initial_render_uses_default_width(self):
        self.assertEqual(self.renderer.calls, [("one two three four", ViewConstants.DEFAULT_MAXIMUM_WIDTH)])
        self.assertEqual(self.model.width, ViewConstants.DEFAULT_MAXIMUM_WIDTH)

    def test_same_maximum_width_twice_renders_once(self):
        self.assertTrue(self.model.set_maximum_width(40))
        document = self.model.document
        self.assertFalse(self.model.set_maximum_width(40))
        self.assertIs(self.model.document, document)
        self.assertEqual(self.model.render_count, 2)
        self.assertEqual(len(self.renderer.calls), 2)

    def test_unchanged_effective_width_does_not_rebuild(self):
        document = self.model.document
        self.assertFalse(self.model.set_maximum_width(ViewConstants.DEFAULT_MAXIMUM_WIDTH))
        self.assertFalse(self.model.set_available_width(500))
        self.assertIs(self.model.document, document)
        self.assertEqual(self.model.render_count, 1)

    def test_effective_width_is_the_smaller_limit(self):
        self.model.set_maximum_width(60)
        self.model.set_available_width(30)
        self.assertEqual(self.model.width, 30)
        self.model.set_available_width(100)
        self.assertEqual(self.model.width, 60)

    def test_returning_to_a_width_hits_the_cache(self):
        first = self.model.document
        self.assertTrue(self.model.set_available_width(10))
        self.assertTrue(self.model.set_available_width(200))
        self.assertIs(self.model.document, first)
        self.assertEqual(self.model.render_count, 2)

    def test_cache_evicts_oldest(self):
        model = DocumentModel("text", self.renderer, cache_size=2)
        model.set_available_width(10)  # cache: 120, 10
        model.set_available_width(20)  # cache: 10, 20
        self.assertEqual(model.render_count, 3)
        model.set_available_width(ViewConstants.DEFAULT_MAXIMUM_WIDTH)
        self.assertEqual(model.render_count, 4)
        model.set_available_width(20)
        self.assertEqual(model.render_count, 4)

    def test_non_positive_width_is_clamped(self):
        self.model.set_maximum_width(0)
        self.assertEqual(self.model.width, 1)
        self.model.set_maximum_width(-5)
        self.assertEqual(self.model.maximum_width, 1)
        self.assertEqual(self.model.document.width, 1)

    def test_set_source(self):
        self.assertFalse(self.model.set_source("one two three four"))
        self.assertTrue(self.model.set_source("other"))
        self.assertEqual(self.model.markup, "other")
        self.assertEqual(self.model.document.lines[0].text, "other")

    def test_html_minimum_width_does_not_defeat_cache(self):
        model = DocumentModel("<p>abcdefgh</p>", "html")
        self.assertTrue(model.set_maximum_width(3))
        self.assertEqual(model.width, 3)
        self.assertEqual(model.document.width, 5)
        self.assertFalse(model.set_maximum_width(3))
        self.assertEqual(model.render_count, 2)


if __name__ == '__main__':
    unittest.main()
