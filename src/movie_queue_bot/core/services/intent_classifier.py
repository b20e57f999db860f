"""Intent classifier implementation."""

import re
from typing import List, Optional, Pattern

from ...infrastructure.logging import LoggerMixin
from ...utils import clean_query, normalize_quotes
from ..models import Intent, IntentKind

# "force" as a word of its own, outside the captured title.
FORCE_MARKER = re.compile(r"\bforce\b", re.IGNORECASE)

# Quoted span, else _emphasized_ span, else bare trailing text.
_QUERY = r'(?:(?:"(.*)"|_(.*)_)|(.*))'


class IntentRecognizer:
    """Recognizes a single intent kind by pattern."""

    def __init__(self, kind: IntentKind, pattern: str, takes_query: bool = True) -> None:
        """Initialize recognizer.

        Args:
            kind: Intent kind produced on a match.
            pattern: Regular expression, matched case-insensitively anywhere in the text.
            takes_query: Whether the pattern captures a movie title.
        """
        self.kind = kind
        self.takes_query = takes_query
        self._pattern: Pattern[str] = re.compile(pattern, re.IGNORECASE)

    def match(self, text: str) -> Optional[Intent]:
        """Try to recognize the intent in normalized text.

        Args:
            text: Normalized message text.

        Returns:
            Intent on a match, otherwise None.
        """
        found = self._pattern.search(text)
        if found is None:
            return None

        query = None
        remainder = text
        if self.takes_query:
            index = next((i for i, g in enumerate(found.groups(), 1) if g is not None), None)
            if index is not None:
                query = clean_query(found.group(index))
                start, end = found.span(index)
                remainder = text[:start] + text[end:]

        return Intent(
            kind=self.kind,
            query=query,
            force=self.kind == IntentKind.ADD_MOVIE and FORCE_MARKER.search(remainder) is not None,
            text=text,
        )


DEFAULT_RECOGNIZERS: List[IntentRecognizer] = [
    IntentRecognizer(
        IntentKind.LIST_QUEUE,
        r"(?:mo+vie|film|(?:motion|moving) picture) (?:list|queue)",
        takes_query=False,
    ),
    IntentRecognizer(
        IntentKind.LOOKUP_MOVIE,
        r'(?:search|look.*up|what\'s|what is|find)(?: (?:"(.*)"|_(.*)_)| (.*))',
    ),
    IntentRecognizer(IntentKind.ADD_MOVIE, r"(?:add|push) " + _QUERY),
    IntentRecognizer(IntentKind.REMOVE_MOVIE, r"(?:remove) " + _QUERY),
]


class IntentClassifier(LoggerMixin):
    """Maps free-form text to an intent using ordered recognizers.

    Recognizers are tried in priority order and the first match wins, so a
    message like "what's on the movie list" is a list request rather than a
    lookup of "on the movie list".
    """

    def __init__(self, recognizers: Optional[List[IntentRecognizer]] = None) -> None:
        """Initialize classifier.

        Args:
            recognizers: Recognizers in priority order. Defaults to the
                list, lookup, add, remove set.
        """
        self._recognizers = list(recognizers) if recognizers is not None else DEFAULT_RECOGNIZERS

    @property
    def recognizers(self) -> List[IntentRecognizer]:
        """Recognizers in priority order."""
        return list(self._recognizers)

    def classify(self, text: str) -> Optional[Intent]:
        """Classify message text.

        Args:
            text: Raw message text.

        Returns:
            Intent of the first matching recognizer, or None if nothing matched.
        """
        normalized = normalize_quotes(text)

        for recognizer in self._recognizers:
            intent = recognizer.match(normalized)
            if intent is not None:
                self.logger.debug(f"Classified message as {intent.kind.value}: {intent.query!r}")
                return intent

        self.logger.debug("No intent matched")
        return None
