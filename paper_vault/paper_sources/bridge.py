"""Citation bridge: attach Semantic Scholar citation counts to any record."""

import logging
from typing import Callable

from ..errors import DataSourceError
from ..semantic_scholar.models import CitationCounts
from .identity import extract_doi_from_url, normalize_doi, strip_version_suffix
from .models import PaperRecord
from .protocols import CitationProvider

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lookup keys, tried in order
# ---------------------------------------------------------------------------


def try_doi(paper: PaperRecord) -> str | None:
    doi = normalize_doi(paper.doi)
    return f"DOI:{doi}" if doi else None


def try_arxiv_id(paper: PaperRecord) -> str | None:
    if paper.is_arxiv and paper.id:
        return f"ARXIV:{strip_version_suffix(paper.id)}"
    return None


def try_doi_from_urls(paper: PaperRecord) -> str | None:
    doi = extract_doi_from_url(paper.landing_url) or extract_doi_from_url(paper.pdf_url)
    return f"DOI:{doi.lower()}" if doi else None


def try_url(paper: PaperRecord) -> str | None:
    url = paper.landing_url or paper.pdf_url
    return f"URL:{url}" if url else None


KEY_EXTRACTORS: tuple[Callable[[PaperRecord], str | None], ...] = (
    try_doi,
    try_arxiv_id,
    try_doi_from_urls,
    try_url,
)


def citation_key(paper: PaperRecord) -> str | None:
    """Semantic Scholar lookup key for a paper, or None if it has no usable identity."""
    for extract in KEY_EXTRACTORS:
        key = extract(paper)
        if key:
            return key
    return None


def counts_match_key(key: str, counts: CitationCounts) -> bool:
    """
    Check a batch entry against the key it was requested with.

    Only DOI and ARXIV keys can be checked, and only when the service sent
    back the matching external id; everything else is trusted by position.
    """
    kind, _, value = key.partition(":")
    if kind == "DOI":
        returned = counts.external_id("DOI")
        return returned is None or normalize_doi(returned) == value.lower()
    if kind == "ARXIV":
        returned = counts.external_id("ArXiv")
        return returned is None or strip_version_suffix(returned) == value
    return True


class CitationBridge:
    """
    Enriches records from any source with citation counts via a CitationProvider.

    Neither arXiv nor the works index provides comparable citation data, but
    Semantic Scholar can look papers up by "DOI:...", "ARXIV:..." or "URL:...".
    """

    def __init__(self, provider: CitationProvider):
        """
        Initialize citation bridge.

        Args:
            provider: Initialized citation provider (e.g. SemanticScholarAdapter)
        """
        self._provider = provider

    async def enrich(self, papers: list[PaperRecord]) -> list[PaperRecord]:
        """
        Return copies of ``papers`` with citation counts where the service knows them.

        Papers without a key, unknown to the service, or whose batch entry
        does not match the requested identifier keep ``citation_count=None``.
        Service failures leave every paper unenriched.
        """
        keys = [citation_key(p) for p in papers]
        unique_keys = list(dict.fromkeys(k for k in keys if k))
        if not unique_keys:
            return list(papers)

        try:
            responses = await self._provider.get_citation_counts(unique_keys)
        except DataSourceError as e:
            logger.warning(f"Citation lookup for {len(unique_keys)} papers failed: {e}")
            return list(papers)

        counts_by_key: dict[str, CitationCounts] = {}
        for key, counts in zip(unique_keys, responses):
            if counts is None:
                continue
            if not counts_match_key(key, counts):
                logger.warning(f"Citation entry for {key} does not match, ignoring it")
                continue
            counts_by_key[key] = counts

        enriched: list[PaperRecord] = []
        for paper, key in zip(papers, keys):
            counts = counts_by_key.get(key) if key else None
            if counts is None or counts.citation_count is None:
                enriched.append(paper)
                continue
            enriched.append(
                paper.model_copy(
                    update={
                        "citation_count": counts.citation_count,
                        "influential_citation_count": counts.influential_citation_count,
                    }
                )
            )

        logger.info(f"Citation counts attached to {len(counts_by_key)} of {len(unique_keys)} keys")
        return enriched
