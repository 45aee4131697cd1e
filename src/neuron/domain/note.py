"""Note model, scheduling state, and parse-time metadata variants.

A :class:`Note` is frozen: the scheduler and the parser return new
instances (``model_copy(update=...)``) rather than mutating in place.
All timestamps are timezone-aware UTC.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime

from pydantic import BaseModel, Field, field_validator

DEFAULT_INTERVAL = 1.0
DEFAULT_EASE = 2.5
MIN_EASE = 1.3
DEFAULT_TITLE = "Untitled"

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Normalize *value* to aware UTC (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


# ---------------------------------------------------------------------------
# Frontmatter metadata variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MetaString:
    value: str


@dataclass(frozen=True)
class MetaStringList:
    values: tuple[str, ...]


@dataclass(frozen=True)
class MetaDate:
    value: date


@dataclass(frozen=True)
class MetaMissing:
    pass


MetadataValue = MetaString | MetaStringList | MetaDate | MetaMissing

MISSING = MetaMissing()


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class ScheduleState(BaseModel):
    """The scheduler's state triple."""

    model_config = {"frozen": True}

    interval: float = Field(default=DEFAULT_INTERVAL, gt=0)
    ease_factor: float = Field(default=DEFAULT_EASE, ge=MIN_EASE)
    due_at: datetime

    @field_validator("due_at")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class Note(BaseModel):
    """A unit of study material, keyed by ``source_path``.

    Attributes:
        id: Surrogate key assigned by the store (None until stored).
        source_path: Absolute path of the originating file. Unique.
        title: From metadata, first ``#`` heading, or ``"Untitled"``.
        tags: Distinct tag strings, first occurrence wins.
        body: Full file text, verbatim.
        created_at: From metadata; the Unix epoch when absent.
        due_at: When the note next becomes eligible for review.
        interval: Days between reviews.
        ease_factor: Interval growth multiplier, never below 1.3.
    """

    model_config = {"frozen": True}

    id: int | None = None
    source_path: str
    title: str = DEFAULT_TITLE
    tags: list[str] = Field(default_factory=list)
    body: str = ""
    created_at: datetime = EPOCH
    due_at: datetime = Field(default_factory=utc_now)
    interval: float = Field(default=DEFAULT_INTERVAL, gt=0)
    ease_factor: float = Field(default=DEFAULT_EASE, ge=MIN_EASE)

    @field_validator("tags")
    @classmethod
    def _distinct_tags(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))

    @field_validator("created_at", "due_at")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    @property
    def schedule(self) -> ScheduleState:
        return ScheduleState(
            interval=self.interval,
            ease_factor=self.ease_factor,
            due_at=self.due_at,
        )

    def with_schedule(self, state: ScheduleState) -> Note:
        """Return a copy carrying *state* as its scheduling fields."""
        return self.model_copy(
            update={
                "interval": state.interval,
                "ease_factor": state.ease_factor,
                "due_at": state.due_at,
            }
        )

    def is_due(self, now: datetime) -> bool:
        return self.due_at <= as_utc(now)
