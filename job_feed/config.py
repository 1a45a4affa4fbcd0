"""YAML config loading and validation."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from job_feed.utils.logging_config import resolve_level

DEFAULT_SOURCES = [
    "SimplifyJobs/Summer2026-Internships",
    "SimplifyJobs/New-Grad-Positions",
]


@dataclass
class DatabaseConfig:
    url: str = "sqlite:///data/job_feed.db"


@dataclass
class EmbeddingConfig:
    provider: str = "openai"  # openai, hashing
    model: str = "text-embedding-3-small"
    dimensions: int = 1536


@dataclass
class MatchingConfig:
    candidate_pool: int = 50
    feed_size: int = 20
    fallback_limit: int = 50
    history_limit: int = 100
    neutral_semantic: float = 75.0


@dataclass
class CacheConfig:
    feed_ttl: int = 3600
    preferences_ttl: int = 1800
    max_entries: int = 10000


@dataclass
class IngestConfig:
    sources: list[str] = field(default_factory=lambda: list(DEFAULT_SOURCES))
    branch: str = "dev"
    source_tag: str = "simplifyjobs"
    max_workers: int = 8


@dataclass
class ApiKeys:
    openai_api_key: str = ""


@dataclass
class AppConfig:
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    embedding: EmbeddingConfig = field(default_factory=EmbeddingConfig)
    matching: MatchingConfig = field(default_factory=MatchingConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    ingest: IngestConfig = field(default_factory=IngestConfig)
    api_keys: ApiKeys = field(default_factory=ApiKeys)
    log_dir: str = "logs"
    log_level: str = "INFO"


def _normalize_database_url(url: str) -> str:
    # Hosted Postgres often hands out postgres:// but SQLAlchemy 2.x requires postgresql://
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


def load_config(config_path: str = "config.yaml") -> AppConfig:
    """Load and validate configuration from YAML file."""
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Copy config.example.yaml to config.yaml and fill in your settings."
        )

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    config = AppConfig()

    # Database (env var takes precedence)
    db_raw = raw.get("database", {})
    config.database = DatabaseConfig(
        url=_normalize_database_url(
            os.environ.get("DATABASE_URL", db_raw.get("url", "sqlite:///data/job_feed.db"))
        ),
    )

    # Embeddings
    emb_raw = raw.get("embedding", {})
    config.embedding = EmbeddingConfig(
        provider=emb_raw.get("provider", "openai"),
        model=emb_raw.get("model", "text-embedding-3-small"),
        dimensions=emb_raw.get("dimensions", 1536),
    )

    # Matching
    matching_raw = raw.get("matching", {})
    config.matching = MatchingConfig(
        candidate_pool=matching_raw.get("candidate_pool", 50),
        feed_size=matching_raw.get("feed_size", 20),
        fallback_limit=matching_raw.get("fallback_limit", 50),
        history_limit=matching_raw.get("history_limit", 100),
        neutral_semantic=matching_raw.get("neutral_semantic", 75.0),
    )

    # Cache
    cache_raw = raw.get("cache", {})
    config.cache = CacheConfig(
        feed_ttl=cache_raw.get("feed_ttl", 3600),
        preferences_ttl=cache_raw.get("preferences_ttl", 1800),
        max_entries=cache_raw.get("max_entries", 10000),
    )

    # Ingestion
    ingest_raw = raw.get("ingest", {})
    config.ingest = IngestConfig(
        sources=ingest_raw.get("sources", list(DEFAULT_SOURCES)),
        branch=ingest_raw.get("branch", "dev"),
        source_tag=ingest_raw.get("source_tag", "simplifyjobs"),
        max_workers=ingest_raw.get("max_workers", 8),
    )

    # API keys (env vars take precedence)
    keys_raw = raw.get("api_keys", {})
    config.api_keys = ApiKeys(
        openai_api_key=os.environ.get("OPENAI_API_KEY", keys_raw.get("openai_api_key", "")),
    )

    config.log_dir = raw.get("log_dir", "logs")
    config.log_level = os.environ.get("LOG_LEVEL", raw.get("log_level", "INFO"))

    return config


def validate_config(config: AppConfig) -> list[str]:
    """Return list of validation warnings (empty = OK)."""
    warnings = []

    if config.embedding.provider not in ("openai", "hashing"):
        warnings.append(f"Unknown embedding provider '{config.embedding.provider}' - using hashing embeddings")

    if config.embedding.provider == "openai" and not config.api_keys.openai_api_key:
        warnings.append("OpenAI embeddings selected but no OpenAI API key configured - will fall back to hashing embeddings")

    if config.embedding.dimensions <= 0:
        warnings.append("Embedding dimensions must be positive")

    if not config.ingest.sources:
        warnings.append("No ingest sources configured - sync will only accept local files")

    if config.cache.preferences_ttl > config.cache.feed_ttl:
        warnings.append("Preference cache TTL is longer than the feed cache TTL")

    if config.matching.feed_size > config.matching.candidate_pool:
        warnings.append("Feed size exceeds the candidate pool - feeds will be shorter than feed_size")

    if resolve_level(config.log_level, default=-1) < 0:
        warnings.append(f"Unknown log level '{config.log_level}' - using INFO")

    return warnings
