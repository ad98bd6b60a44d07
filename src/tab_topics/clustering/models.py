"""
Data models for tab clustering.

This module defines the records the engine consumes (tabs), the per-call
options that tune it, and the result of one clustering run.
"""

from datetime import datetime, UTC
from typing import Any, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator

from tab_topics.config import Settings, get_settings

CATCH_ALL_NAME = "Other"
FALLBACK_NAME = "Misc"


class Tab(BaseModel):
    """Represents a captured browser tab.

    The engine reads only ``id``, ``title`` and ``url``. Any other field the
    caller attaches (window ids, storage indexes, ...) is kept as-is and
    travels with the tab into the output groups.

    Attributes:
        id: Unique identifier for the tab (opaque to the engine)
        title: The title of the tab
        url: The URL of the tab
    """

    id: str
    title: str = ""
    url: str = ""

    model_config = ConfigDict(extra="allow")

    @field_validator('title', 'url', mode='before')
    @classmethod
    def convert_none_to_empty_string(cls, v):
        """Convert None to empty string for text fields."""
        return v if v is not None else ""


class ClusteringOptions(BaseModel):
    """Per-call clustering options.

    Attributes:
        similarity_threshold: Minimum cosine similarity (0-1] for two groups
            to merge. Higher values = stricter clustering.
        min_cluster_size: Groups smaller than this are pooled into "Other"
        extra_stop_words: Words ignored in addition to the built-in lists
    """

    similarity_threshold: float = Field(default=0.2, gt=0.0, le=1.0)
    min_cluster_size: int = Field(default=2, ge=1)
    extra_stop_words: frozenset[str] = Field(default_factory=frozenset)

    model_config = ConfigDict(frozen=True)

    @field_validator('extra_stop_words', mode='before')
    @classmethod
    def normalize_stop_words(cls, v):
        """Lowercase caller stop words so they match tokenizer output."""
        if v is None:
            return frozenset()
        return frozenset(str(word).strip().lower() for word in v if str(word).strip())

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **overrides) -> "ClusteringOptions":
        """Build options from application settings, applying explicit overrides.

        Args:
            settings: Settings to read defaults from (global settings if None)
            **overrides: Option values that take precedence; None values are ignored

        Returns:
            Validated ClusteringOptions
        """
        settings = settings or get_settings()
        values = {
            "similarity_threshold": settings.similarity_threshold,
            "min_cluster_size": settings.min_cluster_size,
            "extra_stop_words": settings.extra_stop_words,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)


class ClusteringResult(BaseModel):
    """Result of a clustering run.

    Attributes:
        groups: Ordered mapping of unique group name to the caller's tab
            records (not copied or re-validated). Named clusters come first
            (largest first); the catch-all bucket is last.
        catch_all_name: Name of the catch-all bucket, if one was emitted
        total_tabs_processed: Total number of tabs processed
        similarity_threshold: Threshold the run used
        timestamp: When the clustering was performed
    """

    groups: dict[str, list[Any]] = Field(default_factory=dict)
    catch_all_name: Optional[str] = None
    total_tabs_processed: int = 0
    similarity_threshold: float
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def clusters(self) -> list[tuple[str, list[Any]]]:
        """Named groups in output order, excluding the catch-all bucket."""
        return [
            (name, tabs) for name, tabs in self.groups.items()
            if name != self.catch_all_name
        ]

    @property
    def catch_all(self) -> list[Any]:
        """Tabs that did not land in a named group."""
        if self.catch_all_name is None:
            return []
        return self.groups.get(self.catch_all_name, [])
