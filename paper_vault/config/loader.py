"""Configuration loader with Pydantic validation and env var expansion."""

import logging
import os
import re
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError

from ..settings import (
    ARXIV_RATE_LIMIT_SECONDS,
    CANDIDATE_POOL_MAX,
    CANDIDATE_POOL_MIN,
    CANDIDATE_POOL_MULTIPLIER,
    OPENALEX_MAX_PAGES,
    OPENALEX_PAGE_SIZE,
    RELEVANCE_CITATION_BOOST,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "sources.yaml"
DEFAULT_PROFILE = "default"


class ArXivConfig(BaseModel):
    """Configuration for the arXiv feed (primary source)."""

    rate_limit_seconds: float = ARXIV_RATE_LIMIT_SECONDS


class OpenAlexConfig(BaseModel):
    """Configuration for the OpenAlex works index."""

    enabled: bool = True
    mailto: str | None = None
    page_size: int = OPENALEX_PAGE_SIZE
    max_pages: int = OPENALEX_MAX_PAGES
    author_candidates: int = 10


class SemanticScholarConfig(BaseModel):
    """Configuration for citation enrichment."""

    enabled: bool = True
    api_key: str | None = None


class RankingConfig(BaseModel):
    """Candidate pool and relevance scoring knobs."""

    pool_min: int = CANDIDATE_POOL_MIN
    pool_max: int = CANDIDATE_POOL_MAX
    pool_multiplier: int = CANDIDATE_POOL_MULTIPLIER
    citation_boost: float = RELEVANCE_CITATION_BOOST


class ProfileConfig(BaseModel):
    """Configuration profile containing all source configs."""

    arxiv: ArXivConfig = ArXivConfig()
    openalex: OpenAlexConfig = OpenAlexConfig()
    semantic_scholar: SemanticScholarConfig = SemanticScholarConfig()
    ranking: RankingConfig = RankingConfig()


class ConfigFile(BaseModel):
    """Root configuration file structure."""

    profiles: dict[str, ProfileConfig]


def expand_env_vars(value: str) -> str:
    """Expand ${VAR} references in string with environment variables.

    Unset variables expand to an empty string.

    Args:
        value: String potentially containing env var references

    Returns:
        String with env vars expanded
    """
    if not isinstance(value, str):
        return value

    pattern = r"\$\{([^}]+)\}"

    def replacer(match):
        return os.environ.get(match.group(1), "")

    return re.sub(pattern, replacer, value)


def expand_env_vars_recursive(data):
    """Recursively expand env vars in nested dict/list structures.

    Strings that expand to nothing become None, so optional keys stay unset.
    """
    if isinstance(data, dict):
        return {k: expand_env_vars_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars_recursive(item) for item in data]
    elif isinstance(data, str):
        return expand_env_vars(data) or None
    else:
        return data


def load_config_from_yaml(config_path: Path, profile_name: str) -> ProfileConfig:
    """Load configuration from YAML file.

    Args:
        config_path: Path to config YAML file
        profile_name: Name of profile to load

    Returns:
        ProfileConfig for the requested profile

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValidationError: If config is invalid
        KeyError: If profile doesn't exist
    """
    with open(config_path) as f:
        raw_data = yaml.safe_load(f)

    # Expand environment variables
    expanded_data = expand_env_vars_recursive(raw_data)

    # Validate structure
    config_file = ConfigFile(**expanded_data)

    # Get requested profile
    if profile_name not in config_file.profiles:
        available = ", ".join(config_file.profiles.keys())
        raise KeyError(
            f"Profile '{profile_name}' not found. " f"Available profiles: {available}"
        )

    return config_file.profiles[profile_name]


def load_config_from_env() -> ProfileConfig:
    """Load configuration from environment variables (fallback mode).

    Returns:
        ProfileConfig constructed from environment variables
    """
    return ProfileConfig(
        openalex=OpenAlexConfig(mailto=os.environ.get("OPENALEX_MAILTO")),
        semantic_scholar=SemanticScholarConfig(
            api_key=os.environ.get("SEMANTIC_SCHOLAR_API_KEY"),
        ),
    )


def list_profiles(config_path: Path | None = None) -> dict[str, ProfileConfig]:
    """All profiles in the config file, by name."""
    config_path = config_path or DEFAULT_CONFIG_PATH
    with open(config_path) as f:
        raw_data = yaml.safe_load(f)
    return ConfigFile(**expand_env_vars_recursive(raw_data)).profiles


def load_config(
    profile: str | None = None,
    config_path: Path | None = None,
) -> ProfileConfig:
    """Load configuration from YAML file or environment variables.

    This is the main entry point for loading configuration. It tries to load
    from a YAML config file first, and falls back to environment variables
    if the file doesn't exist or cannot be parsed.

    Args:
        profile: Profile name to load. If None, uses PAPER_VAULT_PROFILE env var
                or "default".
        config_path: Path to config file. If None, uses the sources.yaml next
                    to this module.

    Returns:
        ProfileConfig with all source configurations

    Raises:
        KeyError: If requested profile doesn't exist
    """
    # Determine profile name
    if profile is None:
        profile = os.environ.get("PAPER_VAULT_PROFILE", DEFAULT_PROFILE)

    # Determine config file path
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    # Try to load from YAML, fall back to env vars
    if not config_path.exists():
        logger.warning(f"Config file {config_path} not found, using environment variables")
        return load_config_from_env()

    try:
        return load_config_from_yaml(config_path, profile)
    except (yaml.YAMLError, ValidationError, TypeError) as e:
        logger.warning(f"Failed to load config from {config_path}: {e}")
        logger.warning("Falling back to environment variables...")
        return load_config_from_env()
