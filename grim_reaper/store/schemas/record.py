"""PR tracking record as stored in {store}/{owner}/{repo}/{pr_number}.yaml."""

from datetime import UTC, datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, Field

from grim_reaper.models import PullRequestStatus, record_key


def _ensure_utc(value: datetime | None) -> datetime | None:
    """Treat naive timestamps (hand-edited files) as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


UTCDateTime = Annotated[datetime, AfterValidator(_ensure_utc)]


class PullRequestRecord(BaseModel):
    """Persisted reaper state for one pull request."""

    repository: str = Field(..., description="Repository full_name, e.g. owner/repo")
    pr_number: int = Field(..., ge=1, description="Pull request number")
    status: PullRequestStatus = Field(..., description="ACTIVE, WARNED, EXECUTED or IMMUNE")
    warning_posted_at: Optional[UTCDateTime] = Field(default=None, description="When the warning comment was posted")
    executed_at: Optional[UTCDateTime] = Field(default=None, description="When the PR was closed")
    last_checked_at: UTCDateTime = Field(..., description="Last time the reaper wrote this record")

    model_config = {"extra": "forbid"}

    @property
    def key(self) -> str:
        """Store key: owner/repo#number."""
        return record_key(self.repository, self.pr_number)
