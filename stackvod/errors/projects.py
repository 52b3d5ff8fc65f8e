from stackvod.errors.base import StackvoError


class ProjectExists(StackvoError):
    def __init__(self, name: str):
        super().__init__(f'Project "{name}" already exists')
        self.name = name
