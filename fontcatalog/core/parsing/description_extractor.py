"""
Extracts the first descriptive paragraph from description HTML.
"""

import html
import re

FIRST_PARAGRAPH = re.compile(r"<p(?:\s[^>]*)?>(.*?)</p\s*>", re.IGNORECASE | re.DOTALL)
TAG = re.compile(r"<[^>]*>")
WHITESPACE = re.compile(r"\s+")


class DescriptionExtractor:
    """
    Picks a description source and returns its first paragraph as plain text.

    The primary document (DESCRIPTION.en_us.html) wins whenever it has
    content; the fallback (article/ARTICLE.en_us.html) is only read when
    the primary is absent or blank.
    """

    def extract(self, primary_html: str | None, fallback_html: str | None) -> str | None:
        """
        Extract the description text.

        Args:
            primary_html: Primary HTML document, or None if missing
            fallback_html: Fallback HTML document, or None if missing

        Returns:
            Plain text of the first paragraph, or None if nothing usable
        """
        source = self._choose_source(primary_html, fallback_html)
        if source is None:
            return None
        return self.first_paragraph_text(source)

    @staticmethod
    def _choose_source(primary_html: str | None, fallback_html: str | None) -> str | None:
        if primary_html and primary_html.strip():
            return primary_html
        if fallback_html and fallback_html.strip():
            return fallback_html
        return None

    @staticmethod
    def first_paragraph_text(document: str) -> str | None:
        """
        Text of the first ``<p>`` element with all inner markup removed.

        Inline tags (anchors, line breaks, emphasis) are dropped without
        inserting separators, entities are unescaped and whitespace runs
        collapse to single spaces.

        Args:
            document: HTML text

        Returns:
            The paragraph text, or None if there is no paragraph or it is empty
        """
        match = FIRST_PARAGRAPH.search(document)
        if match is None:
            return None

        text = TAG.sub("", match.group(1))
        text = html.unescape(text)
        text = WHITESPACE.sub(" ", text).strip()
        return text or None
