import asyncio
from typing import Any
from typing import Awaitable
from typing import Callable

from stackvod.core.dependency_store import DependencyStore
from stackvod.core.registry import UnitRegistry
from stackvod.errors.base import StackvoError
from stackvod.errors.lifecycle import DependencyCycle
from stackvod.errors.lifecycle import DependencyFailed

DEPENDENCY_REQUIRED = 'required'
DEPENDENCY_OPTIONAL = 'optional'

Chain = tuple[str, ...]
EnableDependency = Callable[[str, Chain], Awaitable[Any]]


class DependencyResolver:
    def __init__(self, dependency_store: DependencyStore, registry: UnitRegistry):
        self.dependency_store = dependency_store
        self.registry = registry

    def check_cycles(self, unit: str) -> None:
        document = self.dependency_store.read_document()

        def visit(current: str, chain: Chain, finished: set[str]) -> None:
            if current in chain:
                raise DependencyCycle(chain[chain.index(current):] + (current,))
            if current in finished:
                return
            entry = document.get(current) or {}
            for dependency in entry.get(DEPENDENCY_REQUIRED) or []:
                visit(dependency, chain + (current,), finished)
            finished.add(current)

        visit(unit, (), set())

    async def ensure_dependencies(self, unit: str, enable: EnableDependency, chain: Chain = ()) -> list[str]:
        """
        Starts every required dependency of `unit` that is not running.

        `chain` holds the units whose enable is already in progress, `unit` included.
        Returns the dependencies that were started.
        """
        chain = chain if chain and chain[-1] == unit else chain + (unit,)
        started = []
        for dependency in self.dependency_store.read(unit).required:
            if dependency in chain:
                raise DependencyCycle(chain + (dependency,))
            if await self.registry.is_running(dependency):
                continue
            try:
                await enable(dependency, chain)
            except DependencyCycle:
                raise
            except StackvoError as e:
                raise DependencyFailed(unit, dependency, e) from e
            started.append(dependency)
        return started

    async def dependency_status(self, unit: str) -> dict[str, Any]:
        spec = self.dependency_store.read(unit)
        typed = [(name, DEPENDENCY_REQUIRED) for name in spec.required] \
            + [(name, DEPENDENCY_OPTIONAL) for name in spec.optional]
        running = await asyncio.gather(*[self.registry.is_running(name) for name, _ in typed])
        status = [
            {'name': name, 'type': dependency_type, 'running': is_running}
            for (name, dependency_type), is_running in zip(typed, running)
        ]
        return {
            'service': unit,
            'dependencies': {
                'required': spec.required,
                'optional': spec.optional,
                'internal': spec.internal,
                'description': spec.description,
            },
            'status': status,
            'has_unmet_dependencies': any(
                not item['running'] for item in status if item['type'] == DEPENDENCY_REQUIRED
            ),
        }
