"""Generation job model and step/progress state machine."""

from datetime import datetime
from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel as PydanticBaseModel, Field

from sitegen.models.base import BaseModel, CamelModel


class GenerationStep(str, Enum):
    """Pipeline steps, in execution order."""

    QUEUED = "queued"
    SCRAPING = "scraping"
    ANALYZING = "analyzing"
    SELECTING_TEMPLATE = "selecting_template"
    GENERATING_CONFIG = "generating_config"
    ENRICHING_IMAGES = "enriching_images"
    COMPLETED = "completed"
    FAILED = "failed"


STEP_PROGRESS: dict[GenerationStep, int] = {
    GenerationStep.QUEUED: 0,
    GenerationStep.SCRAPING: 10,
    GenerationStep.ANALYZING: 30,
    GenerationStep.SELECTING_TEMPLATE: 50,
    GenerationStep.GENERATING_CONFIG: 70,
    GenerationStep.ENRICHING_IMAGES: 90,
    GenerationStep.COMPLETED: 100,
    GenerationStep.FAILED: 0,
}

TERMINAL_STEPS = frozenset({GenerationStep.COMPLETED, GenerationStep.FAILED})


class JobState(str, Enum):
    """Queue-level lifecycle of a job."""

    WAITING = "waiting"
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"


class GenerationJobResult(CamelModel):
    """Outcome returned by one pipeline run."""

    success: bool
    business_id: str
    template_id: str | None = None
    website_config_id: str | None = None
    error: str | None = None


class GenerationJob(BaseModel):
    """One run of the pipeline for one business.

    Key Pattern:
        PK: BIZ#{business_id}
        SK: GENJOB#{id}
        GSI1PK: GENJOB#{id}
        GSI1SK: BIZ#{business_id}
    """

    _pk_prefix: ClassVar[str] = "BIZ#"
    _sk_prefix: ClassVar[str] = "GENJOB#"

    business_id: str = Field(..., description="Owning business")
    user_id: str = Field(..., description="User who requested generation")
    business_understanding: dict[str, Any] = Field(
        ..., description="Profile as received; validated during the analyzing step"
    )
    source_url: str | None = None

    state: JobState = JobState.WAITING
    current_step: GenerationStep = GenerationStep.QUEUED
    progress: int = Field(default=0, ge=0, le=100)
    attempts: int = 0
    error: str | None = None
    result: GenerationJobResult | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None

    def get_pk(self) -> str:
        """Get partition key: BIZ#{business_id}."""
        return f"BIZ#{self.business_id}"

    def get_sk(self) -> str:
        """Get sort key: GENJOB#{id}."""
        return f"GENJOB#{self.id}"

    def get_gsi1_keys(self) -> dict[str, str]:
        """Get GSI1 keys for lookup by job id alone."""
        return {
            "GSI1PK": f"GENJOB#{self.id}",
            "GSI1SK": f"BIZ#{self.business_id}",
        }

    def mark_step(self, step: GenerationStep) -> None:
        """Advance to a step and set its fixed progress value."""
        self.current_step = step
        self.progress = STEP_PROGRESS[step]
        if step == GenerationStep.QUEUED:
            self.state = JobState.WAITING
        elif step == GenerationStep.COMPLETED:
            self.state = JobState.COMPLETED
        elif step == GenerationStep.FAILED:
            self.state = JobState.FAILED
        else:
            self.state = JobState.ACTIVE


class JobStatus(PydanticBaseModel):
    """Status view returned to pollers."""

    status: str
    progress: int = 0
    step: str | None = None
    result: GenerationJobResult | None = None

    @classmethod
    def from_job(cls, job: GenerationJob) -> "JobStatus":
        """Project a job record to the polling view.

        ``status`` is ``queued`` while waiting, the current step name while
        active, and ``completed``/``failed`` once terminal.
        """
        if job.state == JobState.WAITING:
            status = GenerationStep.QUEUED.value
        elif job.state == JobState.COMPLETED:
            status = GenerationStep.COMPLETED.value
        elif job.state == JobState.FAILED:
            status = GenerationStep.FAILED.value
        else:
            status = GenerationStep(job.current_step).value

        step = job.error if job.state == JobState.FAILED else GenerationStep(job.current_step).value
        return cls(
            status=status,
            progress=job.progress,
            step=step,
            result=job.result if job.state in (JobState.COMPLETED, JobState.FAILED) else None,
        )

    @classmethod
    def not_found(cls) -> "JobStatus":
        """Status reported for an unknown job id."""
        return cls(status=GenerationStep.FAILED.value, progress=0, step="Job not found")
