"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, socialgraph.toml only contains
overrides. An empty (or absent) config file yields a working SQLite setup.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    backend: Literal["sqlite", "memory"] = "sqlite"
    path: str = "socialgraph.db"
