"""Factory functions building the search pipeline from a config profile."""

import logging

from ..arxiv import ArXivAdapter
from ..openalex import OpenAlexAdapter
from ..paper_sources import CompositeSearchProvider
from ..semantic_scholar import SemanticScholarAdapter
from .loader import (
    ArXivConfig,
    OpenAlexConfig,
    ProfileConfig,
    SemanticScholarConfig,
)

logger = logging.getLogger(__name__)


def create_arxiv_adapter(config: ArXivConfig) -> ArXivAdapter:
    return ArXivAdapter(rate_limit_seconds=config.rate_limit_seconds)


def create_openalex_adapter(config: OpenAlexConfig) -> OpenAlexAdapter | None:
    if not config.enabled:
        logger.info("OpenAlex disabled by profile")
        return None
    return OpenAlexAdapter(
        mailto=config.mailto,
        page_size=config.page_size,
        max_pages=config.max_pages,
        author_candidates=config.author_candidates,
    )


def create_citation_provider(
    config: SemanticScholarConfig,
) -> SemanticScholarAdapter | None:
    if not config.enabled:
        logger.info("Citation enrichment disabled by profile")
        return None
    return SemanticScholarAdapter(api_key=config.api_key)


def create_search_provider(profile: ProfileConfig) -> CompositeSearchProvider:
    """
    Create the composite search provider described by a profile.

    Args:
        profile: Loaded configuration profile

    Returns:
        CompositeSearchProvider (use as an async context manager)
    """
    ranking = profile.ranking
    return CompositeSearchProvider(
        arxiv=create_arxiv_adapter(profile.arxiv),
        works=create_openalex_adapter(profile.openalex),
        citation_provider=create_citation_provider(profile.semantic_scholar),
        pool_min=ranking.pool_min,
        pool_max=ranking.pool_max,
        pool_multiplier=ranking.pool_multiplier,
        citation_boost=ranking.citation_boost,
    )
