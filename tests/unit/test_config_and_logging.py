from pathlib import Path

from litmind.config import DEFAULT_TRENDING_CATEGORIES, RecommendationConfig
from litmind.utils.logging_config import (
    LogFiles,
    Logger,
    clear_trace_id,
    get_trace_id,
    set_trace_id,
)


def test_config_defaults(monkeypatch):
    for name in [
        "LITMIND_ARXIV_ENABLED",
        "LITMIND_CACHE_BACKEND",
        "LITMIND_TRIGGER_BACKEND",
        "LITMIND_TRENDING_CATEGORIES",
        "LITMIND_HTTP_CONNECT_TIMEOUT",
        "LITMIND_HTTP_READ_TIMEOUT",
        "LITMIND_CACHE_TTL_SECONDS",
        "LITMIND_TRIGGER_DELAY_SECONDS",
        "LITMIND_MAX_RECOMMENDATIONS",
    ]:
        monkeypatch.delenv(name, raising=False)

    config = RecommendationConfig.from_env()

    assert config.arxiv_enabled
    assert config.connect_timeout == 15.0
    assert config.read_timeout == 60.0
    assert config.trending_categories == list(DEFAULT_TRENDING_CATEGORIES)
    assert config.cache_backend == "none"
    assert config.cache_ttl_seconds == 3600
    assert config.trigger_backend == "inprocess"
    assert config.trigger_delay_seconds == 2.0


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("LITMIND_ARXIV_ENABLED", "false")
    monkeypatch.setenv("LITMIND_SEMANTIC_SCHOLAR_API_KEY", "key")
    monkeypatch.setenv("LITMIND_TRENDING_CATEGORIES", "cs.CL, stat.ML,")
    monkeypatch.setenv("LITMIND_CACHE_BACKEND", " Redis ")
    monkeypatch.setenv("LITMIND_MAX_RECOMMENDATIONS", "0")
    monkeypatch.setenv("LITMIND_HTTP_READ_TIMEOUT", "not-a-number")

    config = RecommendationConfig.from_env()

    assert not config.arxiv_enabled
    assert config.semantic_scholar_api_key == "key"
    assert config.trending_categories == ["cs.CL", "stat.ML"]
    assert config.cache_backend == "redis"
    assert config.max_recommendations == 1
    assert config.read_timeout == 60.0


def test_logger_writes_trace_id_to_named_file(tmp_path):
    trace_id = set_trace_id()
    Logger.info("generation started", file=LogFiles.RECOMMEND)
    Logger.debug("not written at INFO", file=LogFiles.RECOMMEND)
    Logger.close()

    log_file = Path(tmp_path / "logs" / LogFiles.RECOMMEND)
    content = log_file.read_text(encoding="utf-8")
    assert "generation started" in content
    assert trace_id in content
    assert "[INFO]" in content
    assert "not written" not in content


def test_trace_id_helpers():
    set_trace_id("rec-fixed")
    assert get_trace_id() == "rec-fixed"
    clear_trace_id()
    assert get_trace_id() is None
    assert set_trace_id().startswith("rec-")


def test_log_files_from_yaml():
    assert LogFiles.ERROR == "errors/error.log"
    assert LogFiles.get("api") == "api/api.log"
    assert LogFiles.get("unknown") == "unknown/unknown.log"
