"""Validate settings defaults and environment overrides."""

from visitor_console.config import Settings


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("API_BASE_URL", "API_TOKEN", "VISITS_REFRESH_SECONDS", "MOCK_DATA_FALLBACK"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.API_BASE_URL == "http://localhost:3001"
        assert settings.API_TOKEN is None
        assert settings.VISITS_REFRESH_SECONDS == 120
        assert settings.DASHBOARD_REFRESH_SECONDS == 300
        assert settings.MESSAGE_TIMEOUT_SECONDS == 5
        assert settings.MOCK_DATA_FALLBACK is True

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("API_BASE_URL", "https://vms.example.com")
        monkeypatch.setenv("API_TOKEN", "secret")
        monkeypatch.setenv("VISITS_REFRESH_SECONDS", "30")
        monkeypatch.setenv("MOCK_DATA_FALLBACK", "false")

        settings = Settings(_env_file=None)

        assert settings.API_BASE_URL == "https://vms.example.com"
        assert settings.API_TOKEN == "secret"
        assert settings.VISITS_REFRESH_SECONDS == 30
        assert settings.MOCK_DATA_FALLBACK is False
