"""Unit tests for Settings validation."""

import pytest
from pydantic import ValidationError

from docvault.core.config import Settings


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings(secret_key="k")
        assert settings.search_text_config == "simple"
        assert settings.search_trigram_threshold == 0.3
        assert settings.search_trigram_fallback_threshold == 0.1
        assert settings.share_link_token_bytes == 32

    def test_secret_key_required(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SECRET_KEY", raising=False)
        with pytest.raises(ValidationError, match="SECRET_KEY is required"):
            Settings(_env_file=None)

    def test_text_config_rejects_injection(self) -> None:
        with pytest.raises(ValidationError, match="search_text_config"):
            Settings(secret_key="k", search_text_config="simple'; drop table document;--")

    def test_text_config_must_match_indexed_config(self) -> None:
        # Queries parsed with 'english' would never match 'simple' lexemes
        with pytest.raises(ValidationError, match="search_text_config must be one of"):
            Settings(secret_key="k", search_text_config="english")

    def test_fallback_not_above_primary(self) -> None:
        with pytest.raises(ValidationError, match="must not exceed"):
            Settings(
                secret_key="k",
                search_trigram_threshold=0.2,
                search_trigram_fallback_threshold=0.5,
            )

    def test_threshold_range(self) -> None:
        with pytest.raises(ValidationError, match="in \\(0, 1\\]"):
            Settings(secret_key="k", search_trigram_threshold=1.5)

    def test_short_tokens_rejected(self) -> None:
        with pytest.raises(ValidationError, match="at least 8"):
            Settings(secret_key="k", share_link_token_bytes=4)
