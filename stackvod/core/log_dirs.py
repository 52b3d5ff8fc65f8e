import os
import shutil
from pathlib import Path

from rich.text import Text

from stackvod.output.console import CONSOLE
from stackvod.output.styles import Style

LOG_DIR_MODE = 0o777


class LogDirectories:
    def __init__(self, logs_dir: Path):
        self.logs_dir = logs_dir

    def path(self, unit: str) -> Path:
        return self.logs_dir / unit

    def create(self, unit: str) -> bool:
        path = self.path(unit)
        try:
            path.mkdir(parents=True, exist_ok=True)
            # mkdir mode is masked by umask
            os.chmod(path, LOG_DIR_MODE)
        except OSError as e:
            CONSOLE.print(Text(f'Could not create log directory {path}: {e}', style=Style.suspicious))
            return False
        return True

    def remove(self, unit: str) -> bool:
        path = self.path(unit)
        if not path.exists():
            return False
        try:
            shutil.rmtree(path)
        except OSError as e:
            CONSOLE.print(Text(f'Could not remove log directory {path}: {e}', style=Style.suspicious))
            return False
        return True
