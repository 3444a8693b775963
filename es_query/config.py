"""
Engine configuration.

Settings are read from the environment, optionally seeded from a ``.env``
file.
"""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from es_query.execution.response import DEFAULT_REHYDRATION_FIELD

_TRUE_VALUES = {"1", "true", "yes", "on"}


class EngineSettings(BaseModel):
    """Configuration for the search executor and orchestrator."""

    es_host: str = "http://localhost:9200"
    index_name: Optional[str] = None
    rehydration_field: str = DEFAULT_REHYDRATION_FIELD
    ignore_unavailable: Optional[bool] = None

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "EngineSettings":
        """
        Build settings from ``ES_HOST``, ``ES_INDEX``, ``ES_REHYDRATION_FIELD``
        and ``ES_IGNORE_UNAVAILABLE``.

        Args:
            dotenv_path: ``.env`` file to load first (searched for when omitted)
        """
        load_dotenv(dotenv_path)

        ignore_unavailable = os.getenv("ES_IGNORE_UNAVAILABLE")
        return cls(
            es_host=os.getenv("ES_HOST", cls.model_fields["es_host"].default),
            index_name=os.getenv("ES_INDEX") or None,
            rehydration_field=os.getenv("ES_REHYDRATION_FIELD", DEFAULT_REHYDRATION_FIELD),
            ignore_unavailable=(
                ignore_unavailable.strip().lower() in _TRUE_VALUES
                if ignore_unavailable
                else None
            ),
        )
