"""Tests for environment configuration interface."""

from common.env import Environment, env


class TestEnvironment:
    """Tests for Environment class."""

    def test_database_path_default(self, monkeypatch):
        """Test database_path returns default value."""
        monkeypatch.delenv("DATABASE_PATH", raising=False)
        assert str(Environment.database_path()) == "data/collect.db"

    def test_database_path_from_env(self, monkeypatch):
        """Test database_path reads from environment."""
        monkeypatch.setenv("DATABASE_PATH", "/tmp/test.db")
        assert str(Environment.database_path()) == "/tmp/test.db"

    def test_openai_api_key_unset(self, monkeypatch):
        """Test missing and empty keys both read as None."""
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        assert Environment.openai_api_key() is None

        monkeypatch.setenv("OPENAI_API_KEY", "")
        assert Environment.openai_api_key() is None

    def test_openai_model_default(self, monkeypatch):
        """Test openai_model returns default value."""
        monkeypatch.delenv("OPENAI_MODEL", raising=False)
        assert Environment.openai_model() == "gpt-4o-mini"

    def test_openai_model_from_env(self, monkeypatch):
        """Test openai_model reads from environment."""
        monkeypatch.setenv("OPENAI_MODEL", "gpt-4o")
        assert Environment.openai_model() == "gpt-4o"

    def test_provider_credentials_from_env(self, monkeypatch):
        """Test provider credentials read from environment."""
        monkeypatch.setenv("TMDB_API_KEY", "tmdb-key")
        monkeypatch.setenv("SPOTIFY_CLIENT_ID", "spotify-id")
        monkeypatch.setenv("SPOTIFY_CLIENT_SECRET", "spotify-secret")
        monkeypatch.setenv("TWITCH_CLIENT_ID", "twitch-id")
        monkeypatch.setenv("TWITCH_CLIENT_SECRET", "twitch-secret")
        monkeypatch.setenv("GOOGLE_BOOKS_API_KEY", "books-key")

        assert Environment.tmdb_api_key() == "tmdb-key"
        assert Environment.spotify_client_id() == "spotify-id"
        assert Environment.spotify_client_secret() == "spotify-secret"
        assert Environment.twitch_client_id() == "twitch-id"
        assert Environment.twitch_client_secret() == "twitch-secret"
        assert Environment.google_books_api_key() == "books-key"

    def test_search_requests_per_minute_default(self, monkeypatch):
        """Test search_requests_per_minute returns default value."""
        monkeypatch.delenv("SEARCH_REQUESTS_PER_MINUTE", raising=False)
        assert Environment.search_requests_per_minute() == 60

    def test_search_requests_per_minute_from_env(self, monkeypatch):
        """Test search_requests_per_minute reads from environment."""
        monkeypatch.setenv("SEARCH_REQUESTS_PER_MINUTE", "30")
        assert Environment.search_requests_per_minute() == 30

    def test_search_delay_seconds_default(self, monkeypatch):
        """Test search_delay_seconds returns default value."""
        monkeypatch.delenv("SEARCH_DELAY_SECONDS", raising=False)
        assert Environment.search_delay_seconds() == 0.5

    def test_search_delay_seconds_from_env(self, monkeypatch):
        """Test search_delay_seconds reads from environment."""
        monkeypatch.setenv("SEARCH_DELAY_SECONDS", "0")
        assert Environment.search_delay_seconds() == 0.0


class TestEnvSingleton:
    """Tests for env singleton instance."""

    def test_env_is_environment_instance(self):
        """Test that env is an instance of Environment."""
        assert isinstance(env, Environment)

    def test_env_singleton_methods_work(self, monkeypatch):
        """Test that env singleton methods work."""
        monkeypatch.setenv("OPENAI_MODEL", "gpt-4.1-mini")
        assert env.openai_model() == "gpt-4.1-mini"
