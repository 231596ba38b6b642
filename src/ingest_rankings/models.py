"""Data models for the ingest_rankings pipeline."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

# Articles travel as the source's JSON objects so the archive keeps every field.
RawArticle = dict[str, Any]


@dataclass(frozen=True)
class FetchWindow:
    """Inclusive publication-time bounds for one ingestion run."""
    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"Window start {self.start} is after end {self.end}")


@dataclass
class ArticlePage:
    """One page of articles from the content source, newest first."""
    articles: list[RawArticle]
    next_page: Optional[int]


@dataclass
class PeriodSummary:
    """Top articles for one period as written to the keyed store."""
    period_key: str
    articles: list[dict] = field(default_factory=list)
    stored_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None

    def to_payload(self) -> dict:
        payload: dict[str, Any] = {"articles": self.articles}
        if self.stored_at is not None:
            payload["storedAt"] = self.stored_at.isoformat()
        return payload
