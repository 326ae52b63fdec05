"""
Connection and session configuration.

Values come from the environment (optionally a `.env` file) or from a pasted
JSON connection object.
"""

import json
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from docsql.core.exceptions import ConfigError

DEFAULT_PAGE_SIZE = 50
REQUIRED_KEYS = ("mongo_uri", "database_name")


class StoreConfig(BaseModel):
    """Settings for one store connection."""

    mongo_uri: Optional[str] = None  # None selects the in-memory store
    database_name: str = "docsql"
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, gt=0)
    discard_stale_responses: bool = False

    @classmethod
    def from_env(cls) -> "StoreConfig":
        """
        Build configuration from environment variables.

        Reads MONGO_URI, MONGO_DATABASE, DOCSQL_PAGE_SIZE and
        DOCSQL_DISCARD_STALE, after loading a `.env` file if present.
        """
        load_dotenv()
        return cls(
            mongo_uri=os.getenv("MONGO_URI") or None,
            database_name=os.getenv("MONGO_DATABASE", "docsql"),
            page_size=int(os.getenv("DOCSQL_PAGE_SIZE", str(DEFAULT_PAGE_SIZE))),
            discard_stale_responses=os.getenv("DOCSQL_DISCARD_STALE", "").lower()
            in ("1", "true", "yes"),
        )

    @classmethod
    def from_json(cls, text: str) -> "StoreConfig":
        """
        Validate a pasted connection object.

        Args:
            text: JSON object with at least `mongo_uri` and `database_name`

        Raises:
            ConfigError: If the text is not a usable connection object
        """
        try:
            data = json.loads(text)
        except ValueError as e:
            raise ConfigError("Invalid JSON") from e

        if not isinstance(data, dict):
            raise ConfigError("Config must be a JSON object")

        missing = [key for key in REQUIRED_KEYS if not data.get(key)]
        if missing:
            raise ConfigError(
                "Config must contain at least " + " and ".join(f"'{key}'" for key in REQUIRED_KEYS)
            )

        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigError(str(e)) from e
