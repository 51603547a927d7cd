import json
from typing import Callable

import pytest
from pydantic import ValidationError

from app.analysis.models import AnalysisJob, JobStatus, PiiTaskResult, UnknownTaskResult


class TestJobStatus:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("notStarted", JobStatus.QUEUED),
            ("running", JobStatus.RUNNING),
            ("cancelling", JobStatus.RUNNING),
            ("succeeded", JobStatus.SUCCEEDED),
            ("Succeeded", JobStatus.SUCCEEDED),
            ("failed", JobStatus.FAILED),
            ("partiallyCompleted", JobStatus.FAILED),
            ("cancelled", JobStatus.CANCELLED),
        ],
    )
    def test_maps_provider_status(self, raw: str, expected: JobStatus) -> None:
        assert JobStatus.from_provider(raw) is expected

    def test_unknown_status_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown job status"):
            JobStatus.from_provider("paused")

    @pytest.mark.parametrize(
        ("status", "terminal"),
        [
            (JobStatus.QUEUED, False),
            (JobStatus.RUNNING, False),
            (JobStatus.SUCCEEDED, True),
            (JobStatus.FAILED, True),
            (JobStatus.CANCELLED, True),
        ],
    )
    def test_terminal_states(self, status: JobStatus, terminal: bool) -> None:
        assert status.is_terminal is terminal


class TestAnalysisJob:
    def test_parses_provider_document(self, make_job: Callable[..., AnalysisJob]) -> None:
        job = make_job(targets=["https://acct/redacted-documents/out/doc.pdf"])

        assert job.job_id == "job-1"
        assert job.status is JobStatus.SUCCEEDED
        assert job.is_terminal
        assert job.tasks.total == 1
        assert isinstance(job.tasks.items[0], PiiTaskResult)
        documents = job.processed_documents()
        assert [t.location for t in documents[0].targets] == [
            "https://acct/redacted-documents/out/doc.pdf"
        ]

    def test_ignores_unknown_fields(self, job_payload: Callable[..., dict]) -> None:
        payload = job_payload(targets=[])
        payload["newProviderField"] = {"nested": True}
        job = AnalysisJob.model_validate(payload)
        assert job.status is JobStatus.SUCCEEDED

    def test_unknown_task_kind_is_kept_without_results(
        self, job_payload: Callable[..., dict]
    ) -> None:
        payload = job_payload(targets=["https://acct/c/a.pdf"])
        payload["tasks"]["items"].append(
            {"kind": "EntityLinkingLROResults", "taskName": "other", "status": "succeeded"}
        )
        job = AnalysisJob.model_validate(payload)

        assert isinstance(job.tasks.items[1], UnknownTaskResult)
        assert len(job.processed_documents()) == 1

    def test_running_job_without_results(self) -> None:
        job = AnalysisJob.model_validate({"jobId": "j", "status": "running"})
        assert not job.is_terminal
        assert job.processed_documents() == []

    def test_unknown_job_status_fails_validation(self) -> None:
        with pytest.raises(ValidationError):
            AnalysisJob.model_validate_json(json.dumps({"jobId": "j", "status": "exploded"}))

    def test_snapshots_are_immutable(self, make_job: Callable[..., AnalysisJob]) -> None:
        job = make_job()
        with pytest.raises(ValidationError):
            job.status = JobStatus.FAILED
