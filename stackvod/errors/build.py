from stackvod.errors.base import StackvoError


class BuildStageFailed(StackvoError):
    def __init__(self, project: str, stage: str, exit_code: int, output: str):
        super().__init__(f'{stage.capitalize()} failed for {project} with exit code {exit_code}: {output}')
        self.project = project
        self.stage = stage
        self.exit_code = exit_code
        self.output = output


class BuildCancelled(StackvoError):
    def __init__(self, project: str, stage: str | None):
        super().__init__(f'Build of {project} cancelled' + (f' during {stage}' if stage else ''))
        self.project = project
        self.stage = stage
