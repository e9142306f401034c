"""
Unit tests for Settings

Test Focus:
1. The shipped .env.example loads as-is
2. BACKEND_CORS_ORIGINS accepts comma-separated and JSON list values
"""

from pathlib import Path

import pytest

from reservation_engine.platform.config.core_setting import Settings


ENV_EXAMPLE = Path(__file__).resolve().parents[4] / '.env.example'


@pytest.mark.unit
class TestSettings:
    def test_env_example_loads(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv('BACKEND_CORS_ORIGINS', raising=False)

        settings = Settings(_env_file=ENV_EXAMPLE)  # type: ignore[call-arg]

        assert settings.BACKEND_CORS_ORIGINS == ['http://localhost:3000']
        assert settings.RESERVATION_HOLD_MINUTES == 10
        assert settings.RESERVATION_CREATE_MAX_ATTEMPTS == 5
        assert settings.USER_ID_HEADER == 'X-User-Id'

    @pytest.mark.parametrize(
        'raw,expected',
        [
            ('http://a.test, http://b.test', ['http://a.test', 'http://b.test']),
            ('http://a.test,', ['http://a.test']),
            ('["http://a.test", "http://b.test"]', ['http://a.test', 'http://b.test']),
        ],
    )
    def test_cors_origins_from_environment(
        self, monkeypatch: pytest.MonkeyPatch, raw: str, expected: list[str]
    ) -> None:
        monkeypatch.setenv('BACKEND_CORS_ORIGINS', raw)

        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.BACKEND_CORS_ORIGINS == expected

    def test_cors_origins_default_to_empty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv('BACKEND_CORS_ORIGINS', raising=False)

        assert Settings(_env_file=None).BACKEND_CORS_ORIGINS == []  # type: ignore[call-arg]
