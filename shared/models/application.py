from __future__ import annotations

import uuid
from datetime import UTC, datetime

from pydantic import BaseModel, Field

from shared.models.discovery import CloudProvider


class Application(BaseModel):
    """A registered application whose cloud footprint can be discovered."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = Field(min_length=1)
    description: str = ""
    git_repo_url: str = ""
    source_path: str = ""
    provider: CloudProvider
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
