from typing import Awaitable

from rich.text import Text

from stackvod.core.compose_interface import ComposeShellInterface
from stackvod.core.dependency_store import DependencyStore
from stackvod.core.env_store import EnvFileStore
from stackvod.core.events import EventSink
from stackvod.core.generator import ArtifactGenerator
from stackvod.core.generator import SCOPE_ALL
from stackvod.core.generator import SCOPE_SERVICES
from stackvod.core.locks import UnitLocks
from stackvod.core.log_dirs import LogDirectories
from stackvod.core.naming import TOOLS_PROFILE
from stackvod.core.naming import TOOLS_UNIT
from stackvod.core.naming import UnitNaming
from stackvod.core.operation import LifecycleOperation
from stackvod.core.operation import StepName
from stackvod.core.registry import UnitRegistry
from stackvod.core.resolver import Chain
from stackvod.core.resolver import DependencyResolver
from stackvod.core.runtime_client import DockerRuntimeClient
from stackvod.core.unit_types import LifecycleResult
from stackvod.core.unit_types import UnitKind
from stackvod.errors.base import InvalidRequest
from stackvod.errors.base import StackvoError
from stackvod.errors.lifecycle import ContainerOperationFailed
from stackvod.errors.lifecycle import GenerateFailed
from stackvod.helpers.jobs_result import JobResult
from stackvod.output.console import CONSOLE
from stackvod.output.styles import Style

ENABLE_STEPS = [StepName.DEPENDENCY, StepName.ENV, StepName.GENERATE, StepName.CONTAINER]
SERVICE_DISABLE_STEPS = [StepName.CONTAINER, StepName.ENV, StepName.GENERATE]
TOOL_DISABLE_STEPS = [StepName.ENV, StepName.GENERATE, StepName.CONTAINER]

CONTAINER_ACTIONS = {
    'start': 'started',
    'stop': 'stopped',
    'restart': 'restarted',
}


class LifecycleController:
    """
    Enable/disable state machine for services and tools.

    Enable: dependency -> env -> generate -> container, the flag is reverted
    when anything after the dependency step fails.
    Service disable: container -> env -> generate, cleanup is best-effort.
    Tools share a single container which is recreated on every change.
    """

    def __init__(self,
                 env_store: EnvFileStore,
                 dependency_store: DependencyStore,
                 registry: UnitRegistry,
                 runtime: DockerRuntimeClient,
                 compose: ComposeShellInterface,
                 generator: ArtifactGenerator,
                 log_dirs: LogDirectories,
                 naming: UnitNaming,
                 sink: EventSink,
                 locks: UnitLocks | None = None):
        self.env_store = env_store
        self.dependency_store = dependency_store
        self.registry = registry
        self.runtime = runtime
        self.compose = compose
        self.generator = generator
        self.log_dirs = log_dirs
        self.naming = naming
        self.sink = sink
        self.locks = locks or UnitLocks()
        self.resolver = DependencyResolver(dependency_store, registry)

    def _check_kind(self, kind: UnitKind) -> None:
        if kind not in (UnitKind.SERVICE, UnitKind.TOOL):
            raise InvalidRequest(f'{kind.value.capitalize()}s can not be enabled or disabled')

    def _lock_unit(self, kind: UnitKind, unit: str) -> str:
        # every tool change recreates the same container
        return TOOLS_UNIT if kind == UnitKind.TOOL else unit

    async def _best_effort(self, description: str, operation: Awaitable) -> bool:
        try:
            await operation
        except StackvoError as e:
            CONSOLE.print(Text(f'{description} skipped: {e.message}', style=Style.warning))
            return False
        return True

    async def _generate(self, kind: UnitKind) -> None:
        if kind == UnitKind.SERVICE:
            scope, tolerate = SCOPE_SERVICES, False
        else:
            scope, tolerate = SCOPE_ALL, True
        result = await self.generator.generate(scope, tolerate_hosts_file_errors=tolerate)
        if result == JobResult.BAD:
            raise GenerateFailed(scope, result.log)

    async def _is_running(self, kind: UnitKind, unit: str) -> bool:
        if kind == UnitKind.TOOL:
            return self.env_store.is_enabled(self.naming.env_key(kind, unit)) and await self.registry.is_tools_running()
        return await self.registry.is_running(unit)

    async def _up_service(self, unit: str) -> None:
        for name in [unit] + self.dependency_store.colocated(unit):
            await self._best_effort(
                f'Removing stale container {self.naming.container(name)}',
                self.runtime.remove_container(self.naming.container(name)),
            )

        result = await self.compose.dc_up([unit], [unit], build=True)
        if result == JobResult.BAD:
            raise ContainerOperationFailed(self.naming.container(unit), 'start', result.log)

    async def _recreate_tools(self, required: bool) -> None:
        tools_container = self.naming.tools_container()
        down = await self.compose.dc_down([tools_container], [TOOLS_PROFILE])
        if down == JobResult.BAD:
            CONSOLE.print(Text(f'Could not down {tools_container}, continuing', style=Style.suspicious))

        up = await self.compose.dc_up([tools_container], [TOOLS_PROFILE], build=None)
        if up == JobResult.BAD:
            if required:
                raise ContainerOperationFailed(tools_container, 'recreate', up.log)
            CONSOLE.print(Text(f'Could not up {tools_container}, no tools enabled?', style=Style.suspicious))

    async def _teardown_service(self, unit: str) -> None:
        container = self.naming.container(unit)
        image_id = await self.runtime.container_image_id(container)

        if await self.runtime.remove_container(container):
            CONSOLE.print(Text(f'Removed container {container}', style=Style.context))
        for name in self.dependency_store.colocated(unit):
            await self._best_effort(
                f'Removing co-located container {self.naming.container(name)}',
                self.runtime.remove_container(self.naming.container(name)),
            )

        if image_id:
            await self._best_effort(f'Removing image {image_id}', self.runtime.remove_image(image_id))
        else:
            try:
                images = await self.runtime.find_images(self.naming.image_pattern(unit))
            except StackvoError as e:
                CONSOLE.print(Text(f'Image search for {unit} skipped: {e.message}', style=Style.warning))
                images = []
            for image in images:
                await self._best_effort(f'Removing image {image}', self.runtime.remove_image(image))

        try:
            volumes = await self.runtime.find_volumes(self.naming.volume_prefix(unit))
        except StackvoError as e:
            CONSOLE.print(Text(f'Volume search for {unit} skipped: {e.message}', style=Style.warning))
            volumes = []
        for volume in volumes:
            await self._best_effort(f'Removing volume {volume}', self.runtime.remove_volume(volume))

        self.log_dirs.remove(unit)

    def _rollback(self, kind: UnitKind, unit: str) -> None:
        key = self.naming.env_key(kind, unit)
        try:
            self.env_store.set_enabled(key, False)
        except StackvoError as e:
            CONSOLE.print(Text(f'Rollback of {key} failed: {e.message}', style=Style.bad))
            return
        CONSOLE.print(Text(f'Rolled back {key}=false', style=Style.suspicious))

    async def _enable_dependency(self, unit: str, chain: Chain) -> LifecycleResult:
        return await self.enable(UnitKind.SERVICE, unit, chain)

    async def enable(self, kind: UnitKind, unit: str, chain: Chain = ()) -> LifecycleResult:
        self._check_kind(kind)
        if kind == UnitKind.SERVICE and not chain:
            self.resolver.check_cycles(unit)

        async with self.locks.get(kind, self._lock_unit(kind, unit)):
            if chain and await self._is_running(kind, unit):
                return LifecycleResult(True, f'{unit} is already running', True)

            CONSOLE.print(Text(f'Enabling {kind.value} ', style=Style.info).append(Text(unit, style=Style.mark)))
            operation = LifecycleOperation(self.sink, kind, unit, ENABLE_STEPS)

            with operation.step(StepName.DEPENDENCY, 'Checking dependencies', 'Dependencies ready'):
                if kind == UnitKind.SERVICE:
                    await self.resolver.ensure_dependencies(unit, self._enable_dependency, chain + (unit,))

            if kind == UnitKind.SERVICE:
                self.log_dirs.create(unit)

            key = self.naming.env_key(kind, unit)
            try:
                with operation.step(StepName.ENV, f'Setting {key}=true', f'{key}=true'):
                    self.env_store.set_enabled(key, True)
                with operation.step(StepName.GENERATE, 'Generating configuration', 'Configuration generated'):
                    await self._generate(kind)
                with operation.step(StepName.CONTAINER, 'Starting container', 'Container started'):
                    if kind == UnitKind.SERVICE:
                        await self._up_service(unit)
                    else:
                        await self._recreate_tools(required=True)
            except BaseException:
                # cancellation included, the flag never outlives a failed enable
                self._rollback(kind, unit)
                raise

            CONSOLE.print(Text(f'{kind.value.capitalize()} {unit} enabled', style=Style.good))
            return LifecycleResult(True, f'{kind.value.capitalize()} {unit} enabled successfully',
                                   await self._is_running(kind, unit))

    async def disable(self, kind: UnitKind, unit: str) -> LifecycleResult:
        self._check_kind(kind)

        async with self.locks.get(kind, self._lock_unit(kind, unit)):
            CONSOLE.print(Text(f'Disabling {kind.value} ', style=Style.info).append(Text(unit, style=Style.mark)))
            key = self.naming.env_key(kind, unit)

            if kind == UnitKind.SERVICE:
                operation = LifecycleOperation(self.sink, kind, unit, SERVICE_DISABLE_STEPS)
                with operation.step(StepName.CONTAINER, 'Removing container', 'Container removed'):
                    await self._teardown_service(unit)
                with operation.step(StepName.ENV, f'Setting {key}=false', f'{key}=false'):
                    self.env_store.set_enabled(key, False)
                with operation.step(StepName.GENERATE, 'Generating configuration', 'Configuration generated'):
                    await self._generate(kind)
            else:
                operation = LifecycleOperation(self.sink, kind, unit, TOOL_DISABLE_STEPS)
                with operation.step(StepName.ENV, f'Setting {key}=false', f'{key}=false'):
                    self.env_store.set_enabled(key, False)
                with operation.step(StepName.GENERATE, 'Generating configuration', 'Configuration generated'):
                    await self._generate(kind)
                with operation.step(StepName.CONTAINER, 'Recreating tools container', 'Tools container recreated'):
                    await self._recreate_tools(required=False)

            CONSOLE.print(Text(f'{kind.value.capitalize()} {unit} disabled', style=Style.good))
            return LifecycleResult(True, f'{kind.value.capitalize()} {unit} disabled successfully', False)

    def container_name(self, kind: UnitKind, unit: str) -> str:
        if kind == UnitKind.TOOL:
            return self.naming.tools_container()
        return self.naming.container(unit)

    async def container_action(self, kind: UnitKind, unit: str, action: str) -> LifecycleResult:
        if action not in CONTAINER_ACTIONS:
            raise InvalidRequest(f'Unknown container action {action}')

        container = self.container_name(kind, unit)
        async with self.locks.get(kind, self._lock_unit(kind, unit)):
            await getattr(self.runtime, action)(container)

        running = action != 'stop'
        return LifecycleResult(True, f'Container {container} {CONTAINER_ACTIONS[action]}', running)
