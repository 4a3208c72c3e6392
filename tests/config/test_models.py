from __future__ import annotations

import pytest

from trend_radar.config import ApifyConfig, CacheConfig, ExtractionRules, RadarConfig, ScrapeConfig


def test_defaults_point_at_public_endpoints() -> None:
    config = RadarConfig()
    assert config.feed.url == "https://trends.google.com/trending/rss?geo=US"
    assert config.feed.max_items == 50
    assert len(config.scrape.candidate_urls()) == 3
    assert config.apify.actor_id == "lexis-solutions/tiktok-trending-hashtags-scraper"
    assert not config.apify.enabled


def test_candidate_urls_skip_duplicates_and_blanks() -> None:
    scrape = ScrapeConfig(primary_url="https://a", fallback_urls=["https://a", " ", "https://b"])
    assert scrape.candidate_urls() == ["https://a", "https://b"]


def test_apify_token_and_period_are_coerced() -> None:
    apify = ApifyConfig(token="  secret ", period=30, industry="  ")
    assert apify.token == "secret"
    assert apify.enabled
    assert apify.period == "30"
    assert apify.industry is None


def test_blank_token_disables_api() -> None:
    assert not ApifyConfig(token="   ").enabled


def test_invalid_values_rejected() -> None:
    with pytest.raises(ValueError):
        ApifyConfig(max_items=0)
    with pytest.raises(ValueError):
        RadarConfig(source_timeout=0)


def test_extraction_rules_normalise_indicators() -> None:
    rules = ExtractionRules(block_indicators=[" CAPTCHA ", ""])
    assert rules.block_indicators == ["captcha"]


def test_cache_header_value() -> None:
    assert CacheConfig().header_value() == "s-maxage=300, stale-while-revalidate=600"


def test_default_source_timeout_covers_every_scrape_candidate() -> None:
    config = RadarConfig()
    candidates = len(config.scrape.candidate_urls())
    assert config.source_timeout > candidates * config.http.request_timeout
