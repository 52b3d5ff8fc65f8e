class StackvoError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def kind(self) -> str:
        return type(self).__name__

    def as_json(self) -> dict[str, str]:
        return {
            'kind': self.kind,
            'message': self.message,
        }


class NotFound(StackvoError):
    def __init__(self, what: str, name: str):
        super().__init__(f'{what.capitalize()} "{name}" does not exist')
        self.what = what
        self.name = name


class InvalidRequest(StackvoError):
    ...
