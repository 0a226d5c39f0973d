from src.notevault.config import Settings, get_settings


def test_defaults(monkeypatch):
    for key in ("DATABASE_URL", "SECRET_KEY", "LOG_DIR", "ENVIRONMENT"):
        monkeypatch.delenv(key, raising=False)

    settings = Settings(_env_file=None)

    assert settings.access_token_expire_days == 30
    assert settings.auth_cookie_name == "jwt"
    assert settings.algorithm == "HS256"
    assert settings.database_url.startswith("postgresql+asyncpg://")
    assert settings.is_production is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "Production")
    monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_DAYS", "7")
    monkeypatch.setenv("SEED_DATABASE", "true")

    settings = Settings(_env_file=None)

    assert settings.is_production is True
    assert settings.access_token_expire_days == 7
    assert settings.seed_database is True


def test_get_settings_is_shared():
    assert get_settings() is get_settings()
