"""Query understanding: search terms, user query and title requests."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from search_core.config import ExtractionConfig
from search_core.types import Turn

logger = logging.getLogger(__name__)

_PUNCTUATION = re.compile(r"[^\w\s]")
_CONVERSATION_USER_LINE = re.compile(r"Conversation:\s*\n\s*User:\s*([^\n]+)", re.IGNORECASE)
_USER_LINE = re.compile(r"User:\s*([^\n]+)", re.IGNORECASE)


class TermExtractor:
    """Turns raw queries and conversations into search input."""

    def __init__(self, config: ExtractionConfig | None = None) -> None:
        self.config = config or ExtractionConfig()

    def extract_terms(self, query: str | None) -> list[str]:
        """Return up to `max_terms` lowercase, stopword-free tokens.

        Order follows the query. Running the extractor on its own output
        returns the same terms.
        """
        if not query:
            return []
        tokens = _PUNCTUATION.sub(" ", query.lower()).split()
        terms = [
            token
            for token in tokens
            if len(token) > 1 and token not in self.config.stopwords
        ]
        terms = terms[: self.config.max_terms]
        logger.debug("Extracted terms %s from %r", terms, query)
        return terms

    def extract_user_query(self, messages: Sequence[Turn] | None) -> str:
        """Pick the most recent real user question out of a conversation."""
        candidates = [
            message.content
            for message in messages or ()
            if message.role == "user" and self._is_query_candidate(message.content)
        ]
        if not candidates:
            return self.config.fallback_query
        return candidates[-1]

    def is_title_request(self, messages: Sequence[Turn] | None) -> bool:
        if not messages:
            return False
        last = messages[-1]
        if last.role != "user":
            return False
        return self.is_title_text(last.content)

    def is_title_text(self, text: str | None) -> bool:
        content = (text or "").lower()
        if any(marker in content for marker in self.config.title_markers):
            return True
        return "concise" in content and "title" in content

    def extract_embedded_question(self, content: str | None) -> str | None:
        """Recover the user question quoted inside a title-generation prompt."""
        if not content:
            return None
        for pattern in (_CONVERSATION_USER_LINE, _USER_LINE):
            match = pattern.search(content)
            if match and match.group(1).strip():
                return match.group(1).strip()
        return None

    def generate_title(self, question: str | None, prefix: str | None = None) -> str:
        fallback = prefix or self.config.default_title
        if not question:
            return fallback

        words = [
            word
            for word in _PUNCTUATION.sub(" ", question).split()
            if len(word) > 2 and word.lower() not in self.config.title_stopwords
        ][: self.config.max_title_words]
        if not words:
            return fallback

        term = " ".join(words)
        term = term[0].upper() + term[1:].lower()
        title = f"{fallback}: {term}"
        if len(title) > self.config.max_title_length:
            return term
        return title

    def _is_query_candidate(self, content: str) -> bool:
        # Case-sensitive: a question may start with "Concise".
        if any(marker in content for marker in self.config.excluded_markers):
            return False
        return self.config.min_query_length < len(content) < self.config.max_query_length
