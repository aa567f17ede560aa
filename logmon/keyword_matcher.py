"""
Keyword Matcher for the log monitor.

Case-sensitive substring matching of log lines against a keyword list.
"""

import re
from typing import Iterable, List, Sequence, Tuple, Union

# Used when the operator supplies no keywords at all.
DEFAULT_KEYWORDS: Tuple[str, ...] = ("key1", "key2")

_SEPARATORS = re.compile(r"[\s,]+")


class KeywordMatcher:
    """
    Matches lines that contain any configured keyword.

    - Substring semantics: "key" matches inside "keyboard"
    - Case-sensitive: "ERROR" does not match "error"
    - Keywords are checked in configured order; the first hit wins
    - An empty keyword list never matches
    """

    def __init__(self, keywords: Iterable[str]):
        self._keywords: Tuple[str, ...] = tuple(k for k in keywords if k)
        self._encoded: Tuple[bytes, ...] = tuple(k.encode("utf-8") for k in self._keywords)

    @property
    def keywords(self) -> Tuple[str, ...]:
        """Keywords in match order."""
        return self._keywords

    def matches(self, line: Union[bytes, bytearray, str]) -> bool:
        """Return True if line contains at least one keyword."""
        needles: Sequence = self._keywords if isinstance(line, str) else self._encoded
        for needle in needles:
            if needle in line:
                return True
        return False

    def __repr__(self) -> str:
        return f"KeywordMatcher({list(self._keywords)!r})"


def parse_keywords(text: str, default: Iterable[str] = DEFAULT_KEYWORDS) -> List[str]:
    """
    Split operator input into keywords.

    Accepts space and/or comma separated words ("ERROR, WARN FILL").
    Returns a copy of default when the input holds no keywords.
    """
    keywords = [k for k in _SEPARATORS.split(text.strip()) if k]
    if not keywords:
        return list(default)
    return keywords
