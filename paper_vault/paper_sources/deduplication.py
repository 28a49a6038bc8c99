"""Paper deduplication logic for multi-provider search."""

import logging

from .identity import (
    extract_arxiv_id_from_url,
    normalize_title,
    normalize_url,
    strip_version_suffix,
)
from .models import PaperRecord

logger = logging.getLogger(__name__)


def id_keys(paper: PaperRecord) -> list[str]:
    """Identifier keys: the record id plus the arXiv id, versioned and bare."""
    keys = [paper.id.lower()] if paper.id else []
    arxiv_id = (
        paper.id
        if paper.is_arxiv
        else extract_arxiv_id_from_url(paper.landing_url)
        or extract_arxiv_id_from_url(paper.pdf_url)
    )
    if arxiv_id:
        keys.append(arxiv_id.lower())
        keys.append(strip_version_suffix(arxiv_id).lower())
    return list(dict.fromkeys(keys))


def url_keys(paper: PaperRecord) -> list[str]:
    """Normalized landing and PDF URLs."""
    keys = [normalize_url(paper.landing_url), normalize_url(paper.pdf_url)]
    return list(dict.fromkeys(k for k in keys if k))


def title_key(paper: PaperRecord) -> str:
    return normalize_title(paper.title)


def identity_keys(paper: PaperRecord) -> list[str]:
    """All keys in precedence order: ids, then URLs, then title."""
    keys = [f"id:{k}" for k in id_keys(paper)]
    keys += [f"url:{k}" for k in url_keys(paper)]
    title = title_key(paper)
    if title:
        keys.append(f"title:{title}")
    return keys


def filter_against_native(
    native: list[PaperRecord],
    others: list[PaperRecord],
) -> list[PaperRecord]:
    """
    Drop records from ``others`` that collide with an arXiv result.

    Seen sets start from the arXiv results; each surviving record adds its
    own keys, so later duplicates inside ``others`` are dropped as well.
    """
    seen_ids: set[str] = set()
    seen_urls: set[str] = set()
    seen_titles: set[str] = set()

    def remember(paper: PaperRecord) -> None:
        seen_ids.update(id_keys(paper))
        seen_urls.update(url_keys(paper))
        title = title_key(paper)
        if title:
            seen_titles.add(title)

    for paper in native:
        remember(paper)

    kept: list[PaperRecord] = []
    for paper in others:
        collides = (
            any(k in seen_ids for k in id_keys(paper))
            or any(k in seen_urls for k in url_keys(paper))
            or title_key(paper) in seen_titles
        )
        if collides:
            continue
        kept.append(paper)
        remember(paper)

    logger.debug(f"Pre-filter kept {len(kept)} of {len(others)} works-index records")
    return kept


def _should_prefer(new: PaperRecord, existing: PaperRecord) -> bool:
    """Determine if new paper should replace existing: arXiv beats OpenAlex."""
    return new.is_arxiv and not existing.is_arxiv


def _dedup_pass(papers: list[PaperRecord]) -> list[PaperRecord]:
    unique: list[PaperRecord] = []
    slot_by_key: dict[str, int] = {}

    for paper in papers:
        if not paper.id:
            continue

        keys = identity_keys(paper)
        slot = next((slot_by_key[k] for k in keys if k in slot_by_key), None)

        if slot is None:
            slot = len(unique)
            unique.append(paper)
        elif _should_prefer(paper, unique[slot]):
            logger.debug(f"Replaced duplicate: {unique[slot].title[:50] or 'untitled'}")
            unique[slot] = paper

        for key in keys:
            slot_by_key.setdefault(key, slot)

    return unique


def deduplicate_papers(papers: list[PaperRecord]) -> list[PaperRecord]:
    """
    Deduplicate papers from multiple sources.

    First key wins: a record colliding with an earlier one on any id, URL or
    title key is dropped, except that an arXiv record replaces an OpenAlex
    record already kept in that slot. Order of first appearance is kept.

    A replacement can bridge two slots that were kept apart, so passes repeat
    until nothing more is removed.

    Args:
        papers: List of papers (potentially with duplicates)

    Returns:
        Deduplicated list of papers
    """
    unique = _dedup_pass(papers)
    while True:
        again = _dedup_pass(unique)
        if len(again) == len(unique):
            break
        unique = again

    logger.info(f"Deduplicated {len(papers)} papers to {len(unique)}")
    return unique
