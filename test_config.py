"""
Configuration System Tests

Tests for the YAML configuration loader and factory functions.
"""

import os
from pathlib import Path

import pytest

from paper_vault.config import (
    create_search_provider,
    list_profiles,
    load_config,
    load_config_from_env,
    load_config_from_yaml,
)
from paper_vault.config.loader import DEFAULT_CONFIG_PATH, expand_env_vars
from paper_vault.paper_sources import CompositeSearchProvider

CONFIG_PATH = Path(__file__).parent / "paper_vault" / "config" / "sources.yaml"


def test_load_config_from_yaml():
    """Test loading configuration from YAML file."""
    print("=" * 60)
    print("TEST 1: Load configuration from YAML")
    print("=" * 60)

    profile = load_config_from_yaml(CONFIG_PATH, "default")
    print("\nLoaded profile: default")
    print(f"  arXiv rate limit: {profile.arxiv.rate_limit_seconds}")
    print(f"  OpenAlex enabled: {profile.openalex.enabled}")
    print(f"  Ranking pool: {profile.ranking.pool_min}-{profile.ranking.pool_max}")

    assert profile.arxiv.rate_limit_seconds == 3.0
    assert profile.openalex.enabled is True
    assert profile.openalex.page_size == 50
    assert profile.openalex.max_pages == 20
    assert profile.semantic_scholar.enabled is True
    assert profile.ranking.pool_min == 50
    assert profile.ranking.pool_max == 300
    assert profile.ranking.pool_multiplier == 5
    assert profile.ranking.citation_boost == 0.15
    print("\n[PASS] default profile loaded correctly")

    profile = load_config_from_yaml(CONFIG_PATH, "arxiv-only")
    assert profile.openalex.enabled is False
    assert profile.semantic_scholar.enabled is False
    print("[PASS] arxiv-only profile loaded correctly")

    profile = load_config_from_yaml(CONFIG_PATH, "no-citations")
    assert profile.openalex.enabled is True
    assert profile.semantic_scholar.enabled is False
    print("[PASS] no-citations profile loaded correctly")


def test_unknown_profile_raises():
    with pytest.raises(KeyError):
        load_config_from_yaml(CONFIG_PATH, "does-not-exist")


def test_env_var_expansion(monkeypatch):
    """Test ${VAR} expansion in the YAML file."""
    monkeypatch.setenv("OPENALEX_MAILTO", "me@example.org")
    monkeypatch.delenv("SEMANTIC_SCHOLAR_API_KEY", raising=False)

    profile = load_config_from_yaml(CONFIG_PATH, "default")

    assert profile.openalex.mailto == "me@example.org"
    assert profile.semantic_scholar.api_key is None

    assert expand_env_vars("mail ${OPENALEX_MAILTO}!") == "mail me@example.org!"
    assert expand_env_vars("${PAPER_VAULT_UNSET_VARIABLE}") == ""


def test_load_config_env_fallback(monkeypatch):
    """Test loading configuration from environment variables."""
    print("\n" + "=" * 60)
    print("TEST 2: Load configuration from environment (fallback)")
    print("=" * 60)

    monkeypatch.setenv("SEMANTIC_SCHOLAR_API_KEY", "secret")
    monkeypatch.setenv("OPENALEX_MAILTO", "me@example.org")

    profile = load_config_from_env()
    assert profile.semantic_scholar.api_key == "secret"
    assert profile.openalex.mailto == "me@example.org"
    assert profile.openalex.enabled is True

    profile = load_config(config_path=Path("/nonexistent/sources.yaml"))
    assert profile.semantic_scholar.api_key == "secret"
    print("\n[PASS] Environment fallback works correctly")


def test_invalid_file_falls_back_to_env(tmp_path):
    bad = tmp_path / "sources.yaml"
    bad.write_text("profiles:\n  default:\n    ranking:\n      pool_min: [not, an, int]\n")

    profile = load_config(profile="default", config_path=bad)

    assert profile.ranking.pool_min == 50


def test_load_config_main(monkeypatch):
    """Test the main load_config function."""
    print("\n" + "=" * 60)
    print("TEST 3: Main load_config function")
    print("=" * 60)

    profile = load_config(profile="arxiv-only")
    assert profile.openalex.enabled is False
    print("\n[PASS] load_config with explicit profile works")

    monkeypatch.setenv("PAPER_VAULT_PROFILE", "no-citations")
    profile = load_config()
    assert profile.semantic_scholar.enabled is False
    assert profile.openalex.enabled is True
    print("[PASS] load_config with PAPER_VAULT_PROFILE works")

    monkeypatch.delenv("PAPER_VAULT_PROFILE")
    assert load_config().semantic_scholar.enabled is True


def test_list_profiles():
    assert DEFAULT_CONFIG_PATH.exists()
    names = set(list_profiles())
    assert {"default", "arxiv-only", "no-citations"} <= names


def test_factory_create_search_provider():
    """Test creating the composite provider from a profile."""
    print("\n" + "=" * 60)
    print("TEST 4: Factory - create_search_provider")
    print("=" * 60)

    provider = create_search_provider(load_config(profile="default"))
    assert isinstance(provider, CompositeSearchProvider)
    assert provider._works is not None
    assert provider._bridge is not None
    print("[PASS] default profile builds all three sources")

    provider = create_search_provider(load_config(profile="arxiv-only"))
    assert provider._works is None
    assert provider._bridge is None
    print("[PASS] arxiv-only profile builds arXiv alone")


def main():
    """Run all tests."""
    print("\n" + "=" * 60)
    print("CONFIGURATION SYSTEM TESTS")
    print("=" * 60)

    pytest.main([os.path.abspath(__file__), "-v"])


if __name__ == "__main__":
    main()
