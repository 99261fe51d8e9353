"""Configuration for RavenDB connection."""

import os

from dotenv import load_dotenv

from notionrag.constants import (
    DEFAULT_ACQUIRE_TIMEOUT,
    DEFAULT_MAX_CONNECTIONS,
    DEFAULT_RAVENDB_COLLECTION,
    DEFAULT_RAVENDB_DATABASE,
    DEFAULT_RAVENDB_URL,
    DEFAULT_VECTOR_CANDIDATES,
    env_number,
)

# Load environment variables
load_dotenv()


class RavenDBConfig:
    """Configuration class for RavenDB connection details."""

    @staticmethod
    def get_url() -> str:
        """Get the RavenDB server URL from environment variables.

        Returns:
            str: RavenDB server URL (default: http://localhost:8080)
        """
        return os.getenv("RAVENDB_URL", DEFAULT_RAVENDB_URL)

    @staticmethod
    def get_database_name() -> str:
        """Get the RavenDB database name from environment variables.

        Returns:
            str: Database name (default: notionrag)
        """
        return os.getenv("RAVENDB_DATABASE", DEFAULT_RAVENDB_DATABASE)

    @staticmethod
    def get_collection() -> str:
        """Get the collection holding tenant documents.

        Returns:
            str: Collection name (default: Documents)
        """
        return os.getenv("RAVENDB_COLLECTION", DEFAULT_RAVENDB_COLLECTION)

    @staticmethod
    def get_max_connections() -> int:
        """Get the maximum number of concurrent store operations.

        Returns:
            int: Upper bound on in-flight queries (default: 20)
        """
        return env_number("RAVENDB_MAX_CONNECTIONS", DEFAULT_MAX_CONNECTIONS, int)

    @staticmethod
    def get_acquire_timeout() -> float:
        """Get how long a query may wait for a free store slot.

        Returns:
            float: Seconds (default: 10)
        """
        return env_number("RAVENDB_ACQUIRE_TIMEOUT", DEFAULT_ACQUIRE_TIMEOUT, float)

    @staticmethod
    def get_vector_candidates() -> int:
        """Get the minimum number of candidates a vector search considers.

        Returns:
            int: Candidate count (default: 100); raised to the query limit when smaller
        """
        return env_number("RAVENDB_VECTOR_CANDIDATES", DEFAULT_VECTOR_CANDIDATES, int)
