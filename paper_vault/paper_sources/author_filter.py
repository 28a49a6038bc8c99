"""Permissive author-name matching across differently formatted sources.

"F. Lastname" and "First Lastname" should both satisfy a query such as
"f lastname" or "first lastname". Because of that, a single-letter query
token is treated as an initial and matches the start of any word: "j smith"
matches "J. Smith" and "John Smith", but also "Jones Smith".

Names are compared after NFKC normalization and lowercasing, so letters
outside ASCII ("Müller", "García") take part in matching like any other.
"""

import re
import unicodedata

from .models import PaperRecord

# letters and digits in any script, optionally joined by hyphens
_TOKEN = re.compile(r"[^\W_]+(?:-[^\W_]+)*")


def _fold(text: str) -> str:
    return unicodedata.normalize("NFKC", text).lower()


def author_tokens(query: str) -> list[str]:
    return _TOKEN.findall(_fold(query))


def _whole_word(token: str, text: str) -> bool:
    return re.search(rf"\b{re.escape(token)}\b", text) is not None


def _given_matches(token: str, text: str) -> bool:
    if len(token) >= 2:
        return _whole_word(token, text)
    # single initial: "j" matches "j", "j.", "jane" and "jones"
    return re.search(rf"\b{re.escape(token)}", text) is not None


def author_matches(authors_display: str, query: str) -> bool:
    """
    True when one of the comma-separated authors fits the query.

    The last query token is the surname and must appear as a whole word.
    Every earlier token of two or more characters must appear as a whole
    word. A single-letter token is an initial and matches the start of any
    word in the same author's name, with or without a following period.
    """
    tokens = author_tokens(query)
    if not tokens:
        return True
    surname, given = tokens[-1], tokens[:-1]

    for author in authors_display.split(","):
        name = _fold(author.strip())
        if not name or not _whole_word(surname, name):
            continue
        if all(_given_matches(token, name) for token in given):
            return True
    return False


def filter_by_author(papers: list[PaperRecord], query: str) -> list[PaperRecord]:
    return [p for p in papers if author_matches(p.authors_display, query)]
