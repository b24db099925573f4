"""Configuration for the RavenDB vector index connection."""

import os

from dotenv import load_dotenv

from docsyrag.constants import (
    DEFAULT_EMBEDDING_DIMENSIONS,
    DEFAULT_RAVENDB_DATABASE,
    get_int_setting,
)
from docsyrag.errors import ConfigurationError

# Load environment variables
load_dotenv()


class RavenDBConfig:
    """Configuration class for RavenDB connection details."""

    @staticmethod
    def is_configured() -> bool:
        """Check whether a RavenDB endpoint is configured.

        Returns:
            bool: True if RAVENDB_URL is set
        """
        return bool(os.getenv("RAVENDB_URL"))

    @staticmethod
    def get_url() -> str:
        """Get the RavenDB server URL from environment variables.

        Returns:
            str: RavenDB server URL

        Raises:
            ConfigurationError: If RAVENDB_URL is not set
        """
        url = os.getenv("RAVENDB_URL")
        if not url:
            raise ConfigurationError("RAVENDB_URL not configured")
        return url.rstrip("/")

    @staticmethod
    def get_database_name() -> str:
        """Get the RavenDB database name from environment variables.

        Returns:
            str: Database name (default: docsy)
        """
        return os.getenv("RAVENDB_DATABASE", DEFAULT_RAVENDB_DATABASE)

    @staticmethod
    def get_dimensions() -> int:
        """Get the embedding dimension of the vector index.

        Returns:
            int: Vector size (default: 768)
        """
        return get_int_setting("EMBEDDING_DIMENSIONS", DEFAULT_EMBEDDING_DIMENSIONS)
