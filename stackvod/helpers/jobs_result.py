from enum import Enum
from enum import auto


class JobResult(Enum):
    GOOD = auto()
    BAD = auto()


class OperationError:
    def __init__(self, log: str, exit_code: int | None = None, stdout: bytes = b'', stderr: bytes = b''):
        self.log = log
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr

    def __eq__(self, other):
        return other == JobResult.BAD

    def __repr__(self):
        return f'Operation finished unsuccessful ({self.exit_code=}):\n{self.log}'


def describe_output(stdout: bytes, stderr: bytes) -> str:
    return f'Stdout:\n{stdout.decode("utf-8", "replace")}\n\nStderr:\n{stderr.decode("utf-8", "replace")}'
