"""
Environment-driven configuration for the recommendation engine.

All variables use the ``LITMIND_`` prefix; see ``RecommendationConfig.from_env``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_TRENDING_CATEGORIES = ("cs.AI", "cs.LG", "cs.CV")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "y")


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def _parse_csv_env(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class RecommendationConfig:
    # External providers
    arxiv_enabled: bool = True
    semantic_scholar_enabled: bool = True
    semantic_scholar_api_key: Optional[str] = None
    connect_timeout: float = 15.0
    read_timeout: float = 60.0
    trending_categories: List[str] = field(
        default_factory=lambda: list(DEFAULT_TRENDING_CATEGORIES)
    )

    # Ranking
    max_recommendations: int = 10

    # Cache: redis | memory | none
    cache_backend: str = "none"
    cache_ttl_seconds: int = 3600
    redis_url: str = "redis://127.0.0.1:6379/0"

    # Deferred regeneration: inprocess | arq | none
    trigger_backend: str = "inprocess"
    trigger_delay_seconds: float = 2.0

    @classmethod
    def from_env(cls) -> "RecommendationConfig":
        return cls(
            arxiv_enabled=_env_bool("LITMIND_ARXIV_ENABLED", True),
            semantic_scholar_enabled=_env_bool("LITMIND_SEMANTIC_SCHOLAR_ENABLED", True),
            semantic_scholar_api_key=os.getenv("LITMIND_SEMANTIC_SCHOLAR_API_KEY") or None,
            connect_timeout=_env_float("LITMIND_HTTP_CONNECT_TIMEOUT", 15.0),
            read_timeout=_env_float("LITMIND_HTTP_READ_TIMEOUT", 60.0),
            trending_categories=_parse_csv_env(
                "LITMIND_TRENDING_CATEGORIES", ",".join(DEFAULT_TRENDING_CATEGORIES)
            ),
            max_recommendations=max(1, _env_int("LITMIND_MAX_RECOMMENDATIONS", 10)),
            cache_backend=os.getenv("LITMIND_CACHE_BACKEND", "none").strip().lower(),
            cache_ttl_seconds=max(1, _env_int("LITMIND_CACHE_TTL_SECONDS", 3600)),
            redis_url=os.getenv("LITMIND_REDIS_URL", "redis://127.0.0.1:6379/0"),
            trigger_backend=os.getenv("LITMIND_TRIGGER_BACKEND", "inprocess").strip().lower(),
            trigger_delay_seconds=max(0.0, _env_float("LITMIND_TRIGGER_DELAY_SECONDS", 2.0)),
        )
