import asyncio
import os
import signal
import sys
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path
from typing import Any
from typing import Callable
from typing import NamedTuple

from rich.text import Text

from stackvod.core.compose_interface import ComposeShellInterface
from stackvod.core.events import EventSink
from stackvod.core.generator import ArtifactGenerator
from stackvod.core.generator import SCOPE_PROJECTS
from stackvod.core.operation import StepStatus
from stackvod.core.utils.process_command_output import STREAM_LIMIT
from stackvod.core.utils.process_command_output import process_output_till_done
from stackvod.errors.base import StackvoError
from stackvod.errors.build import BuildCancelled
from stackvod.errors.build import BuildStageFailed
from stackvod.output.console import CONSOLE
from stackvod.output.styles import Style

BUILD_PROGRESS = 'build:progress'

STAGE_GENERATE = 'generate'
STAGE_BUILD = 'build'
STAGE_UP = 'up'

STAGE_SKIPPED = 'skipped'
STAGE_CANCELLED = 'cancelled'


class BuildStage(NamedTuple):
    name: str
    cmd: str


BuildStagesProvider = Callable[[str], list[BuildStage]]


def compose_build_stages(generator: ArtifactGenerator, compose: ComposeShellInterface) -> BuildStagesProvider:
    def stages(project: str) -> list[BuildStage]:
        return [
            BuildStage(STAGE_GENERATE, generator.command(SCOPE_PROJECTS)),
            BuildStage(STAGE_BUILD, compose.project_build_command(project)),
            BuildStage(STAGE_UP, compose.project_up_command(project)),
        ]
    return stages


@dataclass
class StageOutput:
    name: str
    cmd: str
    status: str = StepStatus.PENDING
    exit_code: int | None = None
    stdout: str = ''
    stderr: str = ''

    def as_json(self) -> dict[str, Any]:
        return {
            'name': self.name,
            'status': self.status,
            'exit_code': self.exit_code,
            'stdout': self.stdout,
            'stderr': self.stderr,
        }


@dataclass
class BuildResult:
    project: str
    success: bool
    message: str
    stages: list[StageOutput] = field(default_factory=list)
    error: StackvoError | None = None

    @property
    def cancelled(self) -> bool:
        return isinstance(self.error, BuildCancelled)

    @property
    def stderr(self) -> str:
        return ''.join(stage.stderr for stage in self.stages)

    def as_json(self) -> dict[str, Any]:
        return {
            'project': self.project,
            'success': self.success,
            'message': self.message,
            'cancelled': self.cancelled,
            'error': self.error.as_json() if self.error else None,
            'stages': [stage.as_json() for stage in self.stages],
        }


def _terminate(process: asyncio.subprocess.Process) -> None:
    # the shell runs in its own session, its children go down with it
    try:
        os.killpg(process.pid, signal.SIGTERM)
    except ProcessLookupError:
        pass


class BuildPipeline:
    """
    Sequential generate -> build -> up for one project.

    Every output line goes to `build:progress`; a failing stage skips the rest.
    """

    def __init__(self, root: Path, stages_provider: BuildStagesProvider, sink: EventSink,
                 execution_envs: dict | None = None, verbose: bool = False):
        self.root = root
        self.stages_provider = stages_provider
        self.sink = sink
        self.execution_envs = dict(os.environ)
        if execution_envs is not None:
            self.execution_envs |= execution_envs
        self.verbose = verbose

    def _progress(self, project: str, stage: StageOutput, message: str, stream: str | None = None) -> None:
        payload = {
            'unit': project,
            'step': stage.name,
            'status': stage.status,
            'message': message,
        }
        if stream is not None:
            payload['stream'] = stream
        self.sink.emit(BUILD_PROGRESS, payload)

    async def _run_stage(self, project: str, stage: StageOutput, cancel_event: asyncio.Event) -> None:
        sys.stdout.flush()
        process = await asyncio.create_subprocess_shell(
            stage.cmd,
            env=self.execution_envs,
            cwd=self.root,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            limit=STREAM_LIMIT,
            start_new_session=True,
        )
        CONSOLE.print(Text(stage.cmd, style=Style.context))

        def on_line(stream: str, line: bytes) -> None:
            self._progress(project, stage, line.decode('utf-8', 'replace').rstrip('\n'), stream)

        reading = asyncio.ensure_future(process_output_till_done(process, self.verbose, on_line))
        cancelled = asyncio.ensure_future(cancel_event.wait())
        await asyncio.wait({reading, cancelled}, return_when=asyncio.FIRST_COMPLETED)

        if not reading.done():
            _terminate(process)
        cancelled.cancel()
        try:
            stdout, stderr = await reading
        except ValueError as e:
            # a single line over STREAM_LIMIT
            _terminate(process)
            await process.wait()
            stage.exit_code = process.returncode
            stage.status = StepStatus.FAILED
            self._progress(project, stage, f'{stage.name} output unreadable: {e}')
            raise BuildStageFailed(project, stage.name, process.returncode, f'output unreadable: {e}') from e

        stage.exit_code = process.returncode
        stage.stdout = stdout.decode('utf-8', 'replace')
        stage.stderr = stderr.decode('utf-8', 'replace')

        if cancel_event.is_set():
            stage.status = STAGE_CANCELLED
            self._progress(project, stage, f'{stage.name} cancelled')
            raise BuildCancelled(project, stage.name)

        if process.returncode != 0:
            stage.status = StepStatus.FAILED
            self._progress(project, stage, f'{stage.name} failed with exit code {process.returncode}')
            raise BuildStageFailed(project, stage.name, process.returncode, stage.stderr or stage.stdout)

        stage.status = StepStatus.DONE
        self._progress(project, stage, f'{stage.name} done')

    async def build(self, project: str, cancel_event: asyncio.Event | None = None) -> BuildResult:
        cancel_event = cancel_event or asyncio.Event()
        stages = [StageOutput(stage.name, stage.cmd) for stage in self.stages_provider(project)]

        CONSOLE.print(Text('Building project ', style=Style.info).append(Text(project, style=Style.mark)))
        try:
            for stage in stages:
                if cancel_event.is_set():
                    raise BuildCancelled(project, None)
                stage.status = StepStatus.RUNNING
                self._progress(project, stage, f'{stage.name} started')
                await self._run_stage(project, stage, cancel_event)
        except StackvoError as e:
            for stage in stages:
                if stage.status == StepStatus.PENDING:
                    stage.status = STAGE_SKIPPED
            CONSOLE.print(Text(e.message, style=Style.bad))
            return BuildResult(project, False, e.message, stages, error=e)

        CONSOLE.print(Text(f'Project {project} built and started', style=Style.good))
        return BuildResult(project, True, f'Project {project} built and started successfully', stages)
