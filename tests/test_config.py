import pytest

from likeable.config import LikeableConfig, Settings, load_config
from likeable.plugin import LikeablePlugin
from likeable.utils.exceptions import ConfigurationError


class TestLoadConfig:
    """Test plugin option loading."""

    def test_defaults(self):
        config = load_config()

        assert config.allowed_types == ["post"]
        assert config.pagination_limit == 50
        assert config.max_pagination_limit == 200
        assert config.enable_user_likes is False
        assert config.require_auth is False
        assert config.enforce_ownership is False

    def test_overlay_and_unknown_keys(self):
        """Recognized keys override defaults, the rest is ignored."""
        config = load_config({
            "allowed_types": ["post", "comment"],
            "pagination_limit": 10,
            "theme": "dark",
        })

        assert config.allowed_types == ["post", "comment"]
        assert config.pagination_limit == 10
        assert config.is_allowed_type("comment")
        assert not config.is_allowed_type("video")

    @pytest.mark.parametrize("options, message", [
        ({"allowed_types": []}, "allowed_types cannot be empty"),
        ({"allowed_types": ["post", ""]}, "allowed_types cannot contain empty strings"),
        ({"allowed_types": ["post", "post"]}, "duplicate type in allowed_types: post"),
        ({"pagination_limit": 0}, "pagination_limit must be between 1 and max_pagination_limit"),
        ({"pagination_limit": 300}, "pagination_limit must be between 1 and max_pagination_limit"),
    ])
    def test_invalid_options(self, options, message):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(options)

        assert message in exc_info.value.message

    def test_wrong_type(self):
        with pytest.raises(ConfigurationError):
            load_config({"pagination_limit": "many"})


class TestPluginInitialize:
    """Test plugin startup."""

    def test_invalid_options_stop_startup(self):
        plugin = LikeablePlugin()

        with pytest.raises(ConfigurationError):
            plugin.initialize({"allowed_types": []})
        assert plugin.config is None

    def test_metadata(self):
        plugin = LikeablePlugin()

        assert plugin.name == "likeable"
        assert plugin.dependencies() == ["auth"]
        assert plugin.migration_dependencies() == ["auth"]
        assert plugin.migration_source().endswith("migrations")

    def test_ownership_picks_authorizer(self):
        plugin = LikeablePlugin()
        plugin.initialize({"enforce_ownership": True})

        assert type(plugin.authorizer).__name__ == "OwnerOnly"

    def test_setup_without_database_is_noop(self):
        from fastapi import FastAPI

        app = FastAPI()
        plugin = LikeablePlugin()
        plugin.initialize()
        plugin.setup_endpoints(app, None)

        assert not hasattr(app.state, "likeable")
        assert not any(getattr(route, "path", "").startswith("/likes") for route in app.routes)


class TestSettings:
    """Test environment settings."""

    def test_database_url_is_assembled(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        settings = Settings(
            _env_file=None,
            DB_USER="app",
            DB_PASS="secret",
            DB_HOST="db",
            DB_PORT=5433,
            DB_NAME="likes",
        )

        assert settings.DATABASE_URL == "postgresql+asyncpg://app:secret@db:5433/likes"

    def test_explicit_database_url_wins(self):
        settings = Settings(_env_file=None, DATABASE_URL="sqlite+aiosqlite:///likes.db")

        assert settings.DATABASE_URL == "sqlite+aiosqlite:///likes.db"

    def test_likeable_options_from_environment(self, monkeypatch):
        monkeypatch.setenv("LIKEABLE_ALLOWED_TYPES", '["post", "comment"]')
        monkeypatch.setenv("LIKEABLE_ENABLE_USER_LIKES", "true")
        settings = Settings(_env_file=None)

        config = LikeableConfig(**settings.likeable_options())

        assert config.allowed_types == ["post", "comment"]
        assert config.enable_user_likes is True

    def test_no_signing_key_by_default(self, monkeypatch):
        monkeypatch.delenv("SECRET_KEY", raising=False)
        settings = Settings(_env_file=None)

        assert settings.SECRET_KEY is None

    def test_tokens_cannot_be_issued_without_key(self, monkeypatch):
        from likeable.config import settings
        from likeable.utils.token import generate_token

        monkeypatch.setattr(settings, "SECRET_KEY", None)

        with pytest.raises(ConfigurationError):
            generate_token({"user_id": "user-1"})
