import asyncio

from app.analysis.client import AnalysisClient
from app.analysis.exceptions import PollTimeoutError
from app.analysis.models import AnalysisJob, JobStatus
from app.logging.logger import Log


class JobPoller:
    """Poll loop: fetch -> inspect -> sleep, bounded by an attempt ceiling."""

    def __init__(
        self,
        client: AnalysisClient,
        *,
        interval_seconds: float = 2,
        max_attempts: int = 60,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._client = client
        self._interval_seconds = interval_seconds
        self._max_attempts = max_attempts

    async def poll(self, job_id: str) -> AnalysisJob:
        """Return the first terminal snapshot of *job_id*.

        Every fetch and every sleep is an await, so cancelling the calling task
        stops the loop at the next iteration boundary.

        Raises:
            PollTimeoutError: if the job is still in progress after max_attempts fetches.
        """
        for attempt in range(1, self._max_attempts + 1):
            job = await self._client.get_job(job_id)
            Log.info(
                "Job status",
                job_id=job_id,
                status=job.status.value,
                attempt=f"{attempt}/{self._max_attempts}",
            )
            if job.is_terminal:
                self._warn_on_inconsistent_success(job)
                return job
            if attempt < self._max_attempts:
                await asyncio.sleep(self._interval_seconds)

        raise PollTimeoutError(job_id, self._max_attempts)

    @staticmethod
    def _warn_on_inconsistent_success(job: AnalysisJob) -> None:
        # Top-level status wins; failed task counts are only reported.
        if job.status is JobStatus.SUCCEEDED and job.tasks.failed > 0:
            Log.warning(
                "Job succeeded but reports failed tasks",
                job_id=job.job_id,
                failed=job.tasks.failed,
                total=job.tasks.total,
            )
