"""Environment configuration for the collection pipeline.

All environment variable access goes through this module. A `.env` file in
the working directory is loaded on import.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


class Environment:
    """Interface for accessing environment configuration."""

    @staticmethod
    def database_path() -> Path:
        """Get the SQLite database file path.

        Returns:
            Path to SQLite database file, defaults to ./data/collect.db
        """
        return Path(os.getenv("DATABASE_PATH", "./data/collect.db"))

    @staticmethod
    def openai_api_key() -> str | None:
        """Get the API key used by the extraction service."""
        return os.getenv("OPENAI_API_KEY") or None

    @staticmethod
    def openai_model() -> str:
        """Get the chat model used for extraction.

        Returns:
            Model name, defaults to 'gpt-4o-mini'
        """
        return os.getenv("OPENAI_MODEL", "gpt-4o-mini")

    @staticmethod
    def tmdb_api_key() -> str | None:
        return os.getenv("TMDB_API_KEY") or None

    @staticmethod
    def spotify_client_id() -> str | None:
        return os.getenv("SPOTIFY_CLIENT_ID") or None

    @staticmethod
    def spotify_client_secret() -> str | None:
        return os.getenv("SPOTIFY_CLIENT_SECRET") or None

    @staticmethod
    def twitch_client_id() -> str | None:
        return os.getenv("TWITCH_CLIENT_ID") or None

    @staticmethod
    def twitch_client_secret() -> str | None:
        return os.getenv("TWITCH_CLIENT_SECRET") or None

    @staticmethod
    def google_books_api_key() -> str | None:
        """Get the optional Google Books key (anonymous access works without it)."""
        return os.getenv("GOOGLE_BOOKS_API_KEY") or None

    @staticmethod
    def search_requests_per_minute() -> int:
        """Get the per-provider request budget.

        Returns:
            Requests per minute, defaults to 60
        """
        return int(os.getenv("SEARCH_REQUESTS_PER_MINUTE", "60"))

    @staticmethod
    def search_delay_seconds() -> float:
        """Get the pause between items of a batch search.

        Returns:
            Seconds, defaults to 0.5
        """
        return float(os.getenv("SEARCH_DELAY_SECONDS", "0.5"))


# Singleton instance for convenient access
env = Environment()
