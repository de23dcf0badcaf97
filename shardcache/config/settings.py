"""
ShardCache Configuration Settings

Defaults used by Cache when a constructor argument is left as None.
Each setting can be overridden from the environment.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Cache configuration settings."""

    # Sharding
    NUM_SHARDS: int = int(os.environ.get("SHARDCACHE_NUM_SHARDS", "256"))

    # Expiration settings (seconds)
    DEFAULT_EXPIRATION: float = float(os.environ.get("SHARDCACHE_DEFAULT_EXPIRATION", "0"))  # 0 means never
    CLEANUP_INTERVAL: float = float(os.environ.get("SHARDCACHE_CLEANUP_INTERVAL", "0"))  # 0 disables the janitor

    # Logging settings
    DEBUG: bool = os.environ.get("SHARDCACHE_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.environ.get("SHARDCACHE_LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()
