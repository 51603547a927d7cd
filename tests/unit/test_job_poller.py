import asyncio
from typing import Callable
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.analysis.exceptions import JobStatusError, PollTimeoutError
from app.analysis.models import AnalysisJob, JobStatus
from app.analysis.poller import JobPoller


def _client_returning(jobs: list[AnalysisJob]) -> MagicMock:
    client = MagicMock()
    client.get_job = AsyncMock(side_effect=jobs)
    return client


class TestJobPoller:
    def test_returns_first_terminal_snapshot(self, make_job: Callable[..., AnalysisJob]) -> None:
        running = make_job("running")
        done = make_job("succeeded", targets=["https://acct/c/a.pdf"])
        client = _client_returning([running, running, running, done])
        poller = JobPoller(client, interval_seconds=2, max_attempts=60)

        with patch("app.analysis.poller.asyncio.sleep", new_callable=AsyncMock) as sleep:
            job = asyncio.run(poller.poll("job-1"))

        assert job is done
        assert client.get_job.await_count == 4
        assert sleep.await_count == 3
        sleep.assert_awaited_with(2)

    def test_terminal_on_first_fetch_does_not_sleep(
        self, make_job: Callable[..., AnalysisJob]
    ) -> None:
        client = _client_returning([make_job("failed")])
        poller = JobPoller(client)

        with patch("app.analysis.poller.asyncio.sleep", new_callable=AsyncMock) as sleep:
            job = asyncio.run(poller.poll("job-1"))

        assert job.status is JobStatus.FAILED
        sleep.assert_not_awaited()

    def test_times_out_after_max_attempts(self, make_job: Callable[..., AnalysisJob]) -> None:
        client = MagicMock()
        client.get_job = AsyncMock(return_value=make_job("running"))
        poller = JobPoller(client, max_attempts=60)

        with patch("app.analysis.poller.asyncio.sleep", new_callable=AsyncMock) as sleep:
            with pytest.raises(PollTimeoutError) as exc_info:
                asyncio.run(poller.poll("job-1"))

        assert client.get_job.await_count == 60
        assert sleep.await_count == 59
        assert exc_info.value.attempts == 60
        assert exc_info.value.job_id == "job-1"

    def test_status_error_propagates_without_retry(self) -> None:
        client = MagicMock()
        client.get_job = AsyncMock(side_effect=JobStatusError("boom", status=500, body=""))
        poller = JobPoller(client)

        with patch("app.analysis.poller.asyncio.sleep", new_callable=AsyncMock):
            with pytest.raises(JobStatusError):
                asyncio.run(poller.poll("job-1"))

        assert client.get_job.await_count == 1

    def test_cancellation_stops_polling(self, make_job: Callable[..., AnalysisJob]) -> None:
        client = MagicMock()
        client.get_job = AsyncMock(return_value=make_job("running"))
        poller = JobPoller(client, interval_seconds=30)

        async def scenario() -> None:
            task = asyncio.create_task(poller.poll("job-1"))
            await asyncio.sleep(0)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(scenario())
        assert client.get_job.await_count == 1

    def test_warns_when_succeeded_job_reports_failed_tasks(
        self, make_job: Callable[..., AnalysisJob]
    ) -> None:
        client = _client_returning([make_job("succeeded", targets=[], failed_tasks=1)])
        poller = JobPoller(client)

        with patch("app.analysis.poller.Log") as mock_log:
            job = asyncio.run(poller.poll("job-1"))

        assert job.status is JobStatus.SUCCEEDED
        mock_log.warning.assert_called_once()

    def test_rejects_non_positive_attempt_budget(self) -> None:
        with pytest.raises(ValueError):
            JobPoller(MagicMock(), max_attempts=0)
