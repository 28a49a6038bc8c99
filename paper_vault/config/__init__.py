"""Configuration system for paper sources and ranking."""

from .loader import (
    load_config,
    load_config_from_env,
    load_config_from_yaml,
    list_profiles,
    ArXivConfig,
    OpenAlexConfig,
    SemanticScholarConfig,
    RankingConfig,
    ProfileConfig,
)
from .factory import (
    create_arxiv_adapter,
    create_openalex_adapter,
    create_citation_provider,
    create_search_provider,
)

__all__ = [
    # Loader
    "load_config",
    "load_config_from_env",
    "load_config_from_yaml",
    "list_profiles",
    "ArXivConfig",
    "OpenAlexConfig",
    "SemanticScholarConfig",
    "RankingConfig",
    "ProfileConfig",
    # Factory
    "create_arxiv_adapter",
    "create_openalex_adapter",
    "create_citation_provider",
    "create_search_provider",
]
