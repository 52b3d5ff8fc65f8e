import asyncio
import time
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import Any
from typing import Callable
from uuid import uuid4

from rich.text import Text
from rtry import retry

from stackvod.core.build_pipeline import BuildPipeline
from stackvod.core.build_pipeline import BuildResult
from stackvod.errors.base import NotFound
from stackvod.output.console import CONSOLE
from stackvod.output.styles import Style


class JobStatus(Enum):
    PENDING = 'pending'
    RUNNING = 'running'
    SUCCEEDED = 'succeeded'
    FAILED = 'failed'
    CANCELLED = 'cancelled'


FINISHED = (JobStatus.SUCCEEDED, JobStatus.FAILED, JobStatus.CANCELLED)


@dataclass(eq=False)
class Job:
    id: str
    project: str
    created_at: float
    status: JobStatus = JobStatus.PENDING
    result: BuildResult | None = None
    finished_at: float | None = None
    cancel_event: asyncio.Event = field(default_factory=asyncio.Event)
    task: asyncio.Task | None = None

    @property
    def done(self) -> bool:
        return self.status in FINISHED

    def as_json(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'project': self.project,
            'status': self.status.value,
            'created_at': self.created_at,
            'finished_at': self.finished_at,
            'result': self.result.as_json() if self.result else None,
        }


JobListener = Callable[[Job], None]


class JobKeeper:
    """
    Background build jobs.

    While a project has a job in flight, launching another build of it
    returns the same job.
    """

    def __init__(self, pipeline: BuildPipeline, clock: Callable[[], float] = time.time):
        self.pipeline = pipeline
        self._clock = clock
        self._jobs: dict[str, Job] = {}
        self._inflight: dict[str, Job] = {}
        self._listeners: list[JobListener] = []

    def add_listener(self, listener: JobListener) -> None:
        self._listeners.append(listener)

    def _transition(self, job: Job, status: JobStatus) -> None:
        job.status = status
        if job.done:
            job.finished_at = self._clock()
        for listener in self._listeners:
            listener(job)

    def launch(self, project: str) -> Job:
        inflight = self._inflight.get(project)
        if inflight is not None and not inflight.done:
            CONSOLE.print(Text(f'Build of {project} already in flight: {inflight.id}', style=Style.context))
            return inflight

        job = Job(id=str(uuid4()), project=project, created_at=self._clock())
        self._jobs[job.id] = job
        self._inflight[project] = job
        job.task = asyncio.create_task(self._run(job))
        return job

    async def _run(self, job: Job) -> None:
        self._transition(job, JobStatus.RUNNING)
        try:
            job.result = await self.pipeline.build(job.project, job.cancel_event)
        except Exception as e:
            # the job always reaches a final status, listeners report the failure
            CONSOLE.print(Text(f'Build of {job.project} could not run: {e!r}', style=Style.bad))
            job.result = BuildResult(job.project, False, f'Build of {job.project} could not run: {e}')
        finally:
            if self._inflight.get(job.project) is job:
                del self._inflight[job.project]

        if job.result.success:
            self._transition(job, JobStatus.SUCCEEDED)
        elif job.result.cancelled:
            self._transition(job, JobStatus.CANCELLED)
        else:
            self._transition(job, JobStatus.FAILED)

    def get(self, job_id: str) -> Job:
        if job_id not in self._jobs:
            raise NotFound('job', job_id)
        return self._jobs[job_id]

    def inflight(self, project: str) -> Job | None:
        return self._inflight.get(project)

    def list(self) -> list[Job]:
        return sorted(self._jobs.values(), key=lambda job: job.created_at)

    def cancel(self, job_id: str) -> Job:
        job = self.get(job_id)
        if not job.done:
            CONSOLE.print(Text(f'Cancelling build of {job.project}: {job.id}', style=Style.suspicious))
            job.cancel_event.set()
        return job

    async def wait(self, job_id: str, attempts: int = 600, delay: float = 0.1) -> Job:
        job = self.get(job_id)

        @retry(attempts=attempts, delay=delay, until=lambda waited: not waited.done)
        async def poll() -> Job:
            return job

        return await poll()
