"""Canonical opportunity record shared by every connector.

An Opportunity is created fresh on each aggregation run and never mutated
afterwards. Its ``url`` is the identity key: two records are duplicates only
when their URLs are byte-identical.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DESCRIPTION_MAX_LENGTH = 500

MIN_PRIORITY = 0
MAX_PRIORITY = 3


class OpportunitySource(str, Enum):
    """Origin family of an opportunity, one tag per connector family."""

    GITHUB = "github"
    REDDIT = "reddit"
    HACKER_NEWS = "hackernews"
    FEED = "feed"


class Opportunity(BaseModel):
    """Normalized lead produced by a source connector.

    ``priority`` is a coarse urgency hint (0 = most urgent) consumed by an
    external triage mapping; it carries no ranking semantics here.
    """

    model_config = ConfigDict(frozen=True)

    source: OpportunitySource = Field(..., description="Connector family that produced the record")
    title: str = Field(..., min_length=1, description="Upstream title, used as-is")
    url: str = Field(..., min_length=1, description="Identity key used for deduplication")
    description: Optional[str] = Field(
        None, description=f"Preview text, at most {DESCRIPTION_MAX_LENGTH} characters"
    )
    priority: int = Field(1, ge=MIN_PRIORITY, le=MAX_PRIORITY, description="Urgency hint, 0-3")

    @field_validator("title", "url")
    @classmethod
    def reject_blank(cls, v: str) -> str:
        """Reject whitespace-only values without otherwise altering the text."""
        if not v.strip():
            raise ValueError("Field cannot be empty or whitespace-only")
        return v

    @field_validator("description")
    @classmethod
    def bound_description(cls, v: Optional[str]) -> Optional[str]:
        """Truncate to the preview length; empty previews become None."""
        if not v:
            return None
        return v[:DESCRIPTION_MAX_LENGTH]
