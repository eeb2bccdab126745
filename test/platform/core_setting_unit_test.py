import pytest

from src.platform.config.core_setting import Settings


pytestmark = pytest.mark.unit


class TestSettings:
    def test_comma_separated_lists_from_env(self, monkeypatch):
        monkeypatch.setenv('BACKEND_CORS_ORIGINS', 'http://a.test, http://b.test')
        monkeypatch.setenv('HOLD_REMINDER_MINUTES', '5,15')

        settings = Settings()

        assert settings.BACKEND_CORS_ORIGINS == ['http://a.test', 'http://b.test']
        assert settings.HOLD_REMINDER_MINUTES == [5, 15]

    def test_secret_key_is_not_printed(self, monkeypatch):
        monkeypatch.setenv('PAYSTACK_SECRET_KEY', 'sk_live_real')

        settings = Settings()

        assert 'sk_live_real' not in repr(settings)
        assert settings.PAYSTACK_SECRET_KEY.get_secret_value() == 'sk_live_real'

    def test_database_url_from_environment(self, monkeypatch):
        monkeypatch.setenv('DATABASE_URL', 'sqlite+aiosqlite:///tmp/x.db')

        settings = Settings()

        assert settings.DATABASE_URL == 'sqlite+aiosqlite:///tmp/x.db'
