from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Sequence

SCHEMES = ("http://", "https://", "ftp://", "file://")

DEFAULT_TLDS = (
    "com", "org", "net", "io", "dev", "edu", "gov", "info", "co", "uk", "de", "fr", "eu",
)


@dataclass(frozen=True)
class UrlDetector:
    """Rule-based detection of literal URLs among command-line words.

    A word counts as a URL when it starts with a known scheme, starts with
    ``www.``, or ends its host part in one of the configured top-level
    domains (followed by the end of the word or a ``/``).
    """

    tlds: tuple[str, ...] = DEFAULT_TLDS

    def __post_init__(self):
        alternatives = "|".join(re.escape(t.lstrip(".")) for t in self.tlds if t.strip(". "))
        pattern = rf"^[\w.-]+\.(?:{alternatives})(?:/\S*)?$" if alternatives else r"(?!)"
        object.__setattr__(self, "_tld_re", re.compile(pattern, re.IGNORECASE))

    def is_url(self, word: str) -> bool:
        lower = word.lower()
        if lower.startswith(SCHEMES):
            return len(word) > lower.index("//") + 2
        if lower.startswith("www.") and len(word) > 4:
            return True
        return self._tld_re.match(word) is not None

    def find_urls(self, args: Sequence[str]) -> list[str]:
        """Return every URL-looking word, scanning each argument by whitespace."""
        return [word for word in _words(args) if self.is_url(word)]


def _words(args: Iterable[str]) -> Iterable[str]:
    for arg in args:
        yield from arg.split()
