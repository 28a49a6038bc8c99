"""Final ordering of merged results and global pagination."""

import logging
import math
from datetime import datetime, timezone

from ..settings import (
    CANDIDATE_POOL_MAX,
    CANDIDATE_POOL_MIN,
    CANDIDATE_POOL_MULTIPLIER,
    RELEVANCE_CITATION_BOOST,
)
from .identity import normalize_doi, normalize_title, normalize_url
from .models import PaperRecord, SortKey, SortOrder

logger = logging.getLogger(__name__)


def candidate_pool_size(
    start: int,
    max_results: int,
    minimum: int = CANDIDATE_POOL_MIN,
    maximum: int = CANDIDATE_POOL_MAX,
    multiplier: int = CANDIDATE_POOL_MULTIPLIER,
) -> int:
    """How many candidates each source must supply for a globally sorted page."""
    return min(maximum, max(minimum, (start + max_results) * multiplier))


def published_timestamp(paper: PaperRecord) -> float | None:
    """POSIX timestamp of ``published_date``; None when missing or unparseable."""
    value = paper.published_date.strip()
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        if len(value) == 4 and value.isdigit():  # year only
            parsed = datetime(int(value), 1, 1)
        else:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def fallback_key(paper: PaperRecord) -> str:
    """Deterministic last tie-breaker: doi, native id, URL, then title."""
    return (
        normalize_doi(paper.doi)
        or paper.id.lower()
        or normalize_url(paper.landing_url or paper.pdf_url)
        or normalize_title(paper.title)
    )


def _directed(value: float | None, descending: bool) -> tuple[bool, float]:
    """Sort component that puts missing values last in either direction."""
    if value is None:
        return (True, 0.0)
    return (False, -value if descending else value)


def rank_by_citations(papers: list[PaperRecord], descending: bool = True) -> list[PaperRecord]:
    return sorted(
        papers,
        key=lambda p: (
            _directed(p.citation_count, descending),
            _directed(p.influential_citation_count, descending),
            _directed(published_timestamp(p), descending),
            fallback_key(p),
        ),
    )


def rank_by_date(papers: list[PaperRecord], descending: bool = True) -> list[PaperRecord]:
    return sorted(
        papers,
        key=lambda p: (
            _directed(published_timestamp(p), descending),
            _directed(p.citation_count, True),
            _directed(p.influential_citation_count, True),
            fallback_key(p),
        ),
    )


def relevance_scores(
    papers: list[PaperRecord],
    boost: float = RELEVANCE_CITATION_BOOST,
) -> list[float]:
    """
    Position in the interleaved source order, nudged by citation weight.

    Sources expose no comparable relevance scores, so the position itself is
    the base score: ``(N - index) / N``. The citation boost is
    ``boost * log1p(c) / log1p(max_c)`` over the pool.
    """
    n = len(papers)
    max_citations = max((p.citation_count or 0 for p in papers), default=0)
    scores = []
    for index, paper in enumerate(papers):
        score = (n - index) / n
        if max_citations > 0 and paper.citation_count:
            score += boost * math.log1p(paper.citation_count) / math.log1p(max_citations)
        scores.append(score)
    return scores


def rank_by_relevance(
    papers: list[PaperRecord],
    boost: float = RELEVANCE_CITATION_BOOST,
) -> list[PaperRecord]:
    scores = relevance_scores(papers, boost)
    order = sorted(range(len(papers)), key=lambda i: -scores[i])
    return [papers[i] for i in order]


def rank_papers(
    papers: list[PaperRecord],
    sort: SortKey,
    order: SortOrder = SortOrder.DESCENDING,
    boost: float = RELEVANCE_CITATION_BOOST,
) -> list[PaperRecord]:
    """Order merged papers for the requested sort key."""
    descending = order is SortOrder.DESCENDING
    if sort is SortKey.CITATIONS:
        return rank_by_citations(papers, descending)
    if sort in (SortKey.SUBMITTED_DATE, SortKey.LAST_UPDATED_DATE):
        return rank_by_date(papers, descending)
    return rank_by_relevance(papers, boost)


def paginate(papers: list[PaperRecord], start: int, max_results: int) -> list[PaperRecord]:
    return papers[start : start + max_results]


def interleave(first: list[PaperRecord], second: list[PaperRecord]) -> list[PaperRecord]:
    """first[0], second[0], first[1], second[1], ... then whatever is left."""
    merged: list[PaperRecord] = []
    for i in range(max(len(first), len(second))):
        if i < len(first):
            merged.append(first[i])
        if i < len(second):
            merged.append(second[i])
    return merged
