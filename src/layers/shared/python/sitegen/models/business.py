"""Business model - the record a generation job publishes into."""

from datetime import datetime
from enum import Enum
from typing import Any, ClassVar

from pydantic import Field

from sitegen.models.base import BaseModel


class GenerationStatus(str, Enum):
    """Generation lifecycle as seen on the business record."""

    IDLE = "idle"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class Business(BaseModel):
    """Business entity (only the fields the generation pipeline reads/writes).

    One active website config per business; regeneration overwrites it.

    Key Pattern:
        PK: BIZ#{id}
        SK: PROFILE
    """

    _pk_prefix: ClassVar[str] = "BIZ#"
    _sk_prefix: ClassVar[str] = "PROFILE"

    user_id: str | None = None
    name: str | None = None
    template_id: str | None = None
    website_config: dict[str, Any] | None = None
    image_assets: dict[str, Any] | None = None
    generation_status: GenerationStatus = GenerationStatus.IDLE
    generation_step: str | None = None
    generation_job_id: str | None = None
    generation_started_at: datetime | None = None
    analysis: dict[str, Any] = Field(default_factory=dict)

    def get_pk(self) -> str:
        """Get partition key: BIZ#{id}."""
        return f"BIZ#{self.id}"

    def get_sk(self) -> str:
        """Get sort key: PROFILE."""
        return "PROFILE"

    def merge_analysis(self, updates: dict[str, Any]) -> None:
        """Shallow-merge new audit entries into the analysis blob."""
        merged = dict(self.analysis or {})
        merged.update(updates)
        self.analysis = merged
