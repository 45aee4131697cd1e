"""Pydantic configuration sections with code-baked defaults.

Sparse TOML contract: defaults live here, ``neuron.toml`` only holds
overrides.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from neuron.domain.types import QuestionStyle


class StoreConfig(BaseModel):
    """[store] section. ``path`` None means the per-user app directory."""

    model_config = {"frozen": True}

    path: Path | None = None


class ProviderConfig(BaseModel):
    """[provider] section."""

    model_config = {"frozen": True}

    base_url: str = "http://localhost:11434"
    model: str = "llama3:8b-instruct-q4_K_M"
    timeout: float = Field(default=120.0, gt=0)


class ReviewConfig(BaseModel):
    """[review] section."""

    model_config = {"frozen": True}

    question_type: QuestionStyle = QuestionStyle.MIXED
    brief: bool = False
    mix_limit: int = Field(default=3, ge=1)


class SyncConfig(BaseModel):
    """[sync] section."""

    model_config = {"frozen": True}

    prune: bool = True
