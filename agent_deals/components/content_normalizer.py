"""
Content normalization for pricing page fingerprints.

This module reduces an HTML document to its visible text and strips tokens
that change between fetches without any visible pricing change (build
hashes, trace IDs, UUIDs, timestamps), so that repeated fetches of an
unchanged page hash identically.
"""

import hashlib
import re

from bs4 import BeautifulSoup, Comment

# Elements removed with their content
HIDDEN_ELEMENTS = ["head", "script", "style", "svg"]

# Entities left over after parsing, e.g. from double-escaped "&amp;copy;"
OTHER_ENTITY_PATTERN = r"&#?\w+;"

# UUIDs go before bare hex runs, otherwise their 8 and 12 character groups are
# removed piecemeal and the varying middle groups survive
NOISE_PATTERNS = [
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
    r"\b[0-9a-f]{8,}\b",
    r"\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}\S*",
    r"\b\d{10,13}\b",
]

WHITESPACE_PATTERN = r"\s+"


class ContentNormalizer:
    """Extracts stable visible text from HTML documents."""

    def __init__(self):
        """Initialize normalizer."""
        # Compile regex patterns for better performance
        self.other_entity_regex = re.compile(OTHER_ENTITY_PATTERN)
        self.noise_regexes = [
            re.compile(pattern, re.IGNORECASE) for pattern in NOISE_PATTERNS
        ]
        self.whitespace_regex = re.compile(WHITESPACE_PATTERN)

    def extract_visible_text(self, html: str) -> str:
        """
        Reduce an HTML document to whitespace-normalized visible text.

        The reduction is repeated until its output stops changing, so the
        result is stable when fed back in (decoded "&lt;b&gt;" text would
        otherwise read as a tag on the next pass). Every pass either shortens
        the text or only rewrites whitespace, so the loop terminates.
        """
        text = html
        while True:
            reduced = self._reduce(text)
            if reduced == text:
                return reduced
            text = reduced

    def _reduce(self, html: str) -> str:
        # Only parse when the text can hold markup or entities
        if "<" in html or "&" in html:
            cleaned = self._visible_strings(html)
        else:
            cleaned = html

        cleaned = self.other_entity_regex.sub(" ", cleaned)

        for regex in self.noise_regexes:
            cleaned = regex.sub("", cleaned)

        return self.whitespace_regex.sub(" ", cleaned).strip()

    def _visible_strings(self, html: str) -> str:
        soup = BeautifulSoup(html, "html.parser")

        for element in soup(HIDDEN_ELEMENTS):
            element.decompose()

        for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
            comment.extract()

        return soup.get_text(" ")


_default_normalizer = ContentNormalizer()


def extract_visible_text(html: str) -> str:
    """Module-level shortcut for ContentNormalizer().extract_visible_text."""
    return _default_normalizer.extract_visible_text(html)


def hash_content(content: str) -> str:
    """SHA-256 hex digest of normalized page text."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()
