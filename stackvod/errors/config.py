from pathlib import Path

from stackvod.errors.base import StackvoError


class ConfigUnavailable(StackvoError):
    def __init__(self, path: Path | str, reason: str):
        super().__init__(f'Failed to read {path}: {reason}')
        self.path = path


class ConfigWriteFailed(StackvoError):
    def __init__(self, key: str, reason: str):
        super().__init__(f'Failed to update {key}: {reason}')
        self.key = key
