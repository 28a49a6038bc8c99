"""Configuration settings for the paper vault search aggregator."""

import logging
import os
from dotenv import load_dotenv

load_dotenv()

# Logging setup
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)

# Semantic Scholar (citation counts)
SEMANTIC_SCHOLAR_API_KEY = os.getenv("SEMANTIC_SCHOLAR_API_KEY")
SEMANTIC_SCHOLAR_BASE_URL = "https://api.semanticscholar.org/graph/v1"

# OpenAlex (works index)
# Setting a contact email puts requests in the OpenAlex "polite pool".
OPENALEX_BASE_URL = "https://api.openalex.org"
OPENALEX_MAILTO = os.getenv("OPENALEX_MAILTO")
OPENALEX_PAGE_SIZE = 50
OPENALEX_MAX_PAGES = 20

# arXiv settings
ARXIV_RATE_LIMIT_SECONDS = float(os.getenv("ARXIV_RATE_LIMIT_SECONDS", "3.0"))

# Rate limiting settings
RATE_LIMIT_REQUESTS_PER_SECOND = 10  # With API key
RATE_LIMIT_REQUESTS_PER_SECOND_NO_KEY = 1

# HTTP settings
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30.0"))
USER_AGENT = "paper-vault/0.1 (self-hosted)"

# Retry settings (no retries by default: each upstream gets one attempt)
MAX_RETRIES = int(os.getenv("MAX_RETRIES", "0"))
RETRY_BACKOFF_FACTOR = 2.0

# Ranking
CANDIDATE_POOL_MIN = 50
CANDIDATE_POOL_MAX = 300
CANDIDATE_POOL_MULTIPLIER = 5
RELEVANCE_CITATION_BOOST = 0.15
