import os
import re
from pathlib import Path

from rich.text import Text

from stackvod.errors.config import ConfigUnavailable
from stackvod.errors.config import ConfigWriteFailed
from stackvod.output.console import CONSOLE
from stackvod.output.styles import Style

ENABLE_TRUE = 'true'
ENABLE_FALSE = 'false'


def parse_env(content: str) -> dict[str, str]:
    env = {}
    for line in content.split('\n'):
        line = line.strip()
        if not line or line.startswith('#'):
            continue
        key, sep, value = line.partition('=')
        if sep and key:
            env[key.strip()] = value.strip()
    return env


class EnvFileStore:
    def __init__(self, env_file_path: Path):
        self.env_file_path = env_file_path

    def read_text(self) -> str:
        try:
            with open(self.env_file_path, 'r', encoding='utf-8') as env_file:
                return env_file.read()
        except OSError as e:
            raise ConfigUnavailable(self.env_file_path, str(e)) from e

    def read(self) -> dict[str, str]:
        return parse_env(self.read_text())

    def write(self, key: str, value: str) -> None:
        try:
            content = self.read_text()
        except ConfigUnavailable as e:
            raise ConfigWriteFailed(key, e.message) from e

        line = f'{key}={value}'
        key_line = re.compile(rf'^{re.escape(key)}=.*$', re.MULTILINE)
        if key_line.search(content):
            content = key_line.sub(lambda _: line, content)
        else:
            if content and not content.endswith('\n'):
                content += '\n'
            content += f'{line}\n'

        try:
            with open(self.env_file_path, 'w', encoding='utf-8') as env_file:
                env_file.write(content)
                env_file.flush()
                os.fsync(env_file.fileno())
        except OSError as e:
            raise ConfigWriteFailed(key, str(e)) from e

        CONSOLE.print(Text(f'Updated {line} in {self.env_file_path.name}', style=Style.context))

    def verify(self, key: str, value: str) -> None:
        try:
            actual = self.read().get(key)
        except ConfigUnavailable as e:
            raise ConfigWriteFailed(key, e.message) from e
        if actual != value:
            raise ConfigWriteFailed(key, f'{self.env_file_path.name} not updated correctly: {key}={value} not found')

    def set_enabled(self, key: str, enabled: bool) -> None:
        value = ENABLE_TRUE if enabled else ENABLE_FALSE
        self.write(key, value)
        self.verify(key, value)

    def is_enabled(self, key: str) -> bool:
        return self.read().get(key) == ENABLE_TRUE
