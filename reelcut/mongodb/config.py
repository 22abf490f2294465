"""MongoDB configuration and connection settings."""

import os

from dotenv import load_dotenv

from reelcut.common.base_reelcut_model import BaseReelcutModel

load_dotenv()


class MongoDBConfig(BaseReelcutModel):
    """Configuration for MongoDB connection."""

    connection_string: str
    database_name: str

    # 4MB chunks suit rendered video artifacts
    gridfs_chunk_size_bytes: int = 4 * 1024 * 1024
    gridfs_bucket_name: str = "reelcut_files"

    max_pool_size: int = 10
    min_pool_size: int = 1


def get_mongodb_config() -> MongoDBConfig:
    """Get MongoDB configuration from environment variables.

    Environment variables:
        MONGODB_CONNECTION_STRING: MongoDB connection string
        MONGODB_DATABASE_NAME: Database name (default: reelcut_dev)

    Raises:
        ValueError: If the connection string is not set.
    """
    connection_string = os.environ.get("MONGODB_CONNECTION_STRING", "")
    if not connection_string:
        msg = "MONGODB_CONNECTION_STRING environment variable is required"
        raise ValueError(msg)

    database_name = os.environ.get("MONGODB_DATABASE_NAME", "reelcut_dev")

    return MongoDBConfig(
        connection_string=connection_string,
        database_name=database_name,
    )


def mongodb_configured() -> bool:
    """True when a connection string is present in the environment."""
    return bool(os.environ.get("MONGODB_CONNECTION_STRING"))
