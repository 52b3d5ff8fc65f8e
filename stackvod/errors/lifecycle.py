from stackvod.errors.base import StackvoError


class DependencyFailed(StackvoError):
    def __init__(self, unit: str, dependency: str, cause: StackvoError):
        super().__init__(
            f'Cannot enable {unit}: required dependency {dependency} failed to start: {cause.message}'
        )
        self.unit = unit
        self.dependency = dependency
        self.cause = cause


class DependencyCycle(StackvoError):
    def __init__(self, chain: tuple[str, ...]):
        super().__init__(f'Dependency cycle: {" -> ".join(chain)}')
        self.chain = chain


class GenerateFailed(StackvoError):
    def __init__(self, scope: str | None, log: str):
        super().__init__(f'Generate {scope or "all"} failed:\n{log}')
        self.scope = scope
        self.log = log


class ContainerOperationFailed(StackvoError):
    def __init__(self, container: str, operation: str, reason: str):
        super().__init__(f"Can't {operation} container {container}: {reason}")
        self.container = container
        self.operation = operation
        self.reason = reason
