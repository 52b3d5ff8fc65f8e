import time
from typing import Any
from typing import Awaitable
from typing import Callable

from rich.text import Text

from stackvod.core.build_pipeline import BuildPipeline
from stackvod.core.build_pipeline import BuildStagesProvider
from stackvod.core.build_pipeline import compose_build_stages
from stackvod.core.cache import TTLCache
from stackvod.core.compose_interface import ComposeShellInterface
from stackvod.core.config import Config
from stackvod.core.dependency_store import DependencyStore
from stackvod.core.env_store import EnvFileStore
from stackvod.core.events import BroadcastEventSink
from stackvod.core.events import EventSink
from stackvod.core.events import topic
from stackvod.core.generator import ArtifactGenerator
from stackvod.core.jobs import Job
from stackvod.core.jobs import JobKeeper
from stackvod.core.jobs import JobStatus
from stackvod.core.lifecycle import LifecycleController
from stackvod.core.log_dirs import LogDirectories
from stackvod.core.naming import UnitNaming
from stackvod.core.projects import ProjectManager
from stackvod.core.projects import ProjectRequest
from stackvod.core.registry import UnitRegistry
from stackvod.core.runtime_client import DockerRuntimeClient
from stackvod.core.unit_types import LifecycleResult
from stackvod.core.unit_types import Unit
from stackvod.core.unit_types import UnitKind
from stackvod.errors.base import NotFound
from stackvod.errors.base import StackvoError
from stackvod.output.console import CONSOLE
from stackvod.output.styles import Style

CACHE_KEYS = {
    UnitKind.SERVICE: 'services',
    UnitKind.TOOL: 'tools_list',
    UnitKind.PROJECT: 'projects',
}

CONTAINER_EVENTS = {
    'start': ('starting', 'started'),
    'stop': ('stopping', 'stopped'),
    'restart': ('restarting', 'restarted'),
}

PROJECT_TOPIC = 'project'
BUILD_TOPIC = 'build'


class StackvoService:
    def __init__(self,
                 config: Config | None = None,
                 runtime: DockerRuntimeClient | None = None,
                 compose: ComposeShellInterface | None = None,
                 generator: ArtifactGenerator | None = None,
                 sink: EventSink | None = None,
                 clock: Callable[[], float] = time.monotonic,
                 build_stages: BuildStagesProvider | None = None):
        cfg = config or Config()
        self.config = cfg
        self.naming = UnitNaming(cfg.container_prefix, cfg.domain_suffix)
        self.sink = sink if sink is not None else BroadcastEventSink()
        self.runtime = runtime or DockerRuntimeClient(cfg.docker_host)
        self.compose = compose or ComposeShellInterface.from_config(cfg)
        self.generator = generator or ArtifactGenerator(cfg.generate_script, self.compose)
        self.cache = TTLCache(cfg.cache_ttl, clock)

        self.env_store = EnvFileStore(cfg.env_file_path)
        self.dependency_store = DependencyStore(cfg.dependencies_file, cfg.colocated_containers)
        self.registry = UnitRegistry(self.env_store, self.runtime, self.naming, cfg.projects_dir, cfg.ssl_enabled)
        self.controller = LifecycleController(
            env_store=self.env_store,
            dependency_store=self.dependency_store,
            registry=self.registry,
            runtime=self.runtime,
            compose=self.compose,
            generator=self.generator,
            log_dirs=LogDirectories(cfg.logs_dir),
            naming=self.naming,
            sink=self.sink,
        )
        self.pipeline = BuildPipeline(
            root=cfg.root,
            stages_provider=build_stages or compose_build_stages(self.generator, self.compose),
            sink=self.sink,
            execution_envs={'DOCKER_HOST': cfg.docker_host},
            verbose=cfg.verbose_docker_compose_commands,
        )
        self.jobs = JobKeeper(self.pipeline)
        self.jobs.add_listener(self._on_job)
        self.projects = ProjectManager(cfg.projects_dir, self.runtime, self.naming, self.generator)

    async def list_units(self, kind: UnitKind) -> list[Unit]:
        return await self.cache.get_or_compute(CACHE_KEYS[kind], lambda: self.registry.list_units(kind))

    async def list_services(self) -> list[Unit]:
        return await self.list_units(UnitKind.SERVICE)

    async def list_tools(self) -> list[Unit]:
        return await self.list_units(UnitKind.TOOL)

    async def list_projects(self) -> list[Unit]:
        return await self.list_units(UnitKind.PROJECT)

    async def _mutate(self, kind: UnitKind, name: str, before: str, after: str,
                      operation: Callable[[], Awaitable[LifecycleResult]],
                      after_payload: Callable[[LifecycleResult], dict[str, Any]]) -> LifecycleResult:
        self.sink.emit(topic(kind, before), {'unit': name})
        try:
            result = await operation()
        except StackvoError as e:
            self.sink.emit(topic(kind, 'error'), {'unit': name, 'error': e.message})
            raise
        except Exception as e:
            CONSOLE.print(Text(f'{before.capitalize()} {name} crashed: {e!r}', style=Style.bad))
            self.sink.emit(topic(kind, 'error'), {'unit': name, 'error': str(e) or type(e).__name__})
            raise
        finally:
            self.cache.invalidate_all()
        self.sink.emit(topic(kind, after), {'unit': name} | after_payload(result))
        return result

    async def enable(self, kind: UnitKind, name: str) -> LifecycleResult:
        return await self._mutate(
            kind, name, 'enabling', 'enabled',
            lambda: self.controller.enable(kind, name),
            lambda result: {'configured': True, 'running': result.running},
        )

    async def disable(self, kind: UnitKind, name: str) -> LifecycleResult:
        return await self._mutate(
            kind, name, 'disabling', 'disabled',
            lambda: self.controller.disable(kind, name),
            lambda result: {'configured': False, 'running': False},
        )

    async def container_action(self, kind: UnitKind, name: str, action: str) -> LifecycleResult:
        before, after = CONTAINER_EVENTS.get(action, (action, action))
        return await self._mutate(
            kind, name, before, after,
            lambda: self.controller.container_action(kind, name, action),
            lambda result: {'running': result.running},
        )

    async def start(self, kind: UnitKind, name: str) -> LifecycleResult:
        return await self.container_action(kind, name, 'start')

    async def stop(self, kind: UnitKind, name: str) -> LifecycleResult:
        return await self.container_action(kind, name, 'stop')

    async def restart(self, kind: UnitKind, name: str) -> LifecycleResult:
        return await self.container_action(kind, name, 'restart')

    async def dependencies(self, name: str) -> dict[str, Any]:
        return await self.controller.resolver.dependency_status(name)

    def _on_job(self, job: Job) -> None:
        if job.status == JobStatus.RUNNING:
            self.sink.emit(f'{BUILD_TOPIC}:start', {'project': job.project, 'job': job.id})
            return
        if not job.done:
            return

        self.cache.invalidate_all()
        if job.status == JobStatus.SUCCEEDED:
            self.sink.emit(f'{BUILD_TOPIC}:success', {
                'project': job.project, 'job': job.id, 'message': job.result.message,
            })
        else:
            self.sink.emit(f'{BUILD_TOPIC}:error', {
                'project': job.project, 'job': job.id, 'error': job.result.message,
                'cancelled': job.status == JobStatus.CANCELLED,
            })

    def build(self, project: str) -> Job:
        if not self.projects.path(project).is_dir():
            raise NotFound('project', project)
        return self.jobs.launch(project)

    def job(self, job_id: str) -> Job:
        return self.jobs.get(job_id)

    def cancel_job(self, job_id: str) -> Job:
        return self.jobs.cancel(job_id)

    async def wait_job(self, job_id: str, attempts: int = 600, delay: float = 0.1) -> Job:
        return await self.jobs.wait(job_id, attempts, delay)

    async def create_project(self, request: ProjectRequest) -> tuple[dict[str, Any], Job]:
        name = request.get('name')
        self.sink.emit(f'{PROJECT_TOPIC}:creating', {'project': name})
        try:
            config = self.projects.create(request)
            try:
                job = self.build(config['name'])
            except StackvoError:
                self.projects.discard(config['name'])
                raise
        except StackvoError as e:
            self.sink.emit(f'{PROJECT_TOPIC}:error', {'project': name, 'error': e.message})
            raise
        finally:
            self.cache.invalidate_all()

        self.sink.emit(f'{PROJECT_TOPIC}:created', {'project': config['name'], 'job': job.id})
        return config, job

    async def delete_project(self, name: str) -> None:
        self.sink.emit(f'{PROJECT_TOPIC}:deleting', {'project': name})
        inflight = self.jobs.inflight(name)
        if inflight is not None:
            self.jobs.cancel(inflight.id)
            await self.jobs.wait(inflight.id)
        try:
            await self.projects.delete(name)
        except StackvoError as e:
            self.sink.emit(f'{PROJECT_TOPIC}:error', {'project': name, 'error': e.message})
            raise
        finally:
            self.cache.invalidate_all()
        self.sink.emit(f'{PROJECT_TOPIC}:deleted', {'project': name})

    async def _bulk(self, action: str, running_only: bool) -> dict[str, Any]:
        containers = [
            container for container in await self.runtime.list_containers()
            if container.name not in self.config.non_stop_containers
            and (container.running or not running_only)
        ]
        _, done = CONTAINER_EVENTS[action]

        results = []
        for container in containers:
            try:
                await getattr(self.runtime, action)(container.name)
            except StackvoError as e:
                CONSOLE.print(Text(f'Could not {action} {container.name}: {e.message}', style=Style.bad))
                results.append({'container': container.name, 'status': 'failed', 'error': e.message})
            else:
                results.append({'container': container.name, 'status': done})

        self.cache.invalidate_all()
        return {
            'total': len(containers),
            'results': results,
        }

    async def start_all(self) -> dict[str, Any]:
        return await self._bulk('start', running_only=False)

    async def stop_all(self) -> dict[str, Any]:
        return await self._bulk('stop', running_only=True)

    async def restart_all(self) -> dict[str, Any]:
        return await self._bulk('restart', running_only=True)


class StackvoServiceManager:
    stackvo_service = None

    def __init__(self):
        if StackvoServiceManager.stackvo_service is None:
            StackvoServiceManager.stackvo_service = StackvoService()

    def get(self) -> StackvoService:
        return StackvoServiceManager.stackvo_service
