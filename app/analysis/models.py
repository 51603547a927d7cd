"""Wire models for the document-analysis job API.

Responses are parsed into frozen snapshots; fields the provider adds later are
ignored. Task items are a tagged union on ``kind`` so that unknown task kinds
do not break parsing of the job as a whole.
"""

import enum
from datetime import datetime
from typing import Annotated, Any, ClassVar, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, field_validator
from pydantic.alias_generators import to_camel


class JobStatus(str, enum.Enum):
    QUEUED = "queued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATUSES

    @classmethod
    def from_provider(cls, value: object) -> "JobStatus":
        """Map a provider status string onto the job state machine.

        Raises:
            ValueError: for a status the provider contract does not define.
        """
        if isinstance(value, JobStatus):
            return value
        status = _PROVIDER_STATUSES.get(str(value).strip().lower())
        if status is None:
            raise ValueError(f"Unknown job status: {value!r}")
        return status


_TERMINAL_STATUSES = frozenset({JobStatus.SUCCEEDED, JobStatus.FAILED, JobStatus.CANCELLED})

_PROVIDER_STATUSES: dict[str, JobStatus] = {
    "notstarted": JobStatus.QUEUED,
    "queued": JobStatus.QUEUED,
    "running": JobStatus.RUNNING,
    "cancelling": JobStatus.RUNNING,
    "succeeded": JobStatus.SUCCEEDED,
    "failed": JobStatus.FAILED,
    "partiallycompleted": JobStatus.FAILED,
    "cancelled": JobStatus.CANCELLED,
}


class _ProviderModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
        protected_namespaces=(),
    )


class DocumentLocation(_ProviderModel):
    kind: str = ""
    location: str


class ProcessedDocument(_ProviderModel):
    id: str = ""
    source: DocumentLocation | None = None
    targets: list[DocumentLocation] = Field(default_factory=list)
    warnings: list[Any] = Field(default_factory=list)


class TaskResults(_ProviderModel):
    documents: list[ProcessedDocument] = Field(default_factory=list)
    errors: list[Any] = Field(default_factory=list)
    model_version: str = ""


class _TaskItem(_ProviderModel):
    kind: str
    task_name: str = ""
    status: JobStatus
    last_update_date_time: datetime | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _map_status(cls, value: object) -> JobStatus:
        return JobStatus.from_provider(value)


class PiiTaskResult(_TaskItem):
    """Result item of a PII redaction task."""

    KINDS: ClassVar[frozenset[str]] = frozenset(
        {"PiiEntityRecognitionLROResults", "PiiEntityRecognition"}
    )

    results: TaskResults | None = None


class UnknownTaskResult(_TaskItem):
    """Any task kind this worker does not submit; kept for status bookkeeping only."""


def _task_tag(value: Any) -> str:
    kind = value.get("kind") if isinstance(value, dict) else getattr(value, "kind", None)
    return "pii" if kind in PiiTaskResult.KINDS else "unknown"


TaskResult = Annotated[
    Union[
        Annotated[PiiTaskResult, Tag("pii")],
        Annotated[UnknownTaskResult, Tag("unknown")],
    ],
    Discriminator(_task_tag),
]


class TaskSummary(_ProviderModel):
    completed: int = 0
    failed: int = 0
    in_progress: int = 0
    total: int = 0
    items: list[TaskResult] = Field(default_factory=list)


class AnalysisJob(_ProviderModel):
    """One immutable snapshot of a provider job."""

    job_id: str = ""
    display_name: str = ""
    status: JobStatus
    created_date_time: datetime | None = None
    last_updated_date_time: datetime | None = None
    expiration_date_time: datetime | None = None
    errors: list[Any] = Field(default_factory=list)
    tasks: TaskSummary = Field(default_factory=TaskSummary)

    @field_validator("status", mode="before")
    @classmethod
    def _map_status(cls, value: object) -> JobStatus:
        return JobStatus.from_provider(value)

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def processed_documents(self) -> list[ProcessedDocument]:
        """Documents of every PII task result, in task order."""
        documents: list[ProcessedDocument] = []
        for item in self.tasks.items:
            if isinstance(item, PiiTaskResult) and item.results is not None:
                documents.extend(item.results.documents)
        return documents
