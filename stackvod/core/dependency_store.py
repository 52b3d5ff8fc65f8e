from pathlib import Path

import yaml
from rich.text import Text

from stackvod.core.unit_types import DependencySpec
from stackvod.output.console import CONSOLE
from stackvod.output.styles import Style


def read_dependencies_file(filename: str | Path) -> dict:
    # json documents are valid yaml
    with open(filename) as f:
        return yaml.load(f, Loader=yaml.FullLoader) or {}


class DependencyStore:
    def __init__(self, dependencies_file: Path, default_colocated: dict[str, list[str]] | None = None):
        self.dependencies_file = dependencies_file
        self.default_colocated = default_colocated or {}

    def read_document(self) -> dict:
        try:
            document = read_dependencies_file(self.dependencies_file)
        except FileNotFoundError:
            return {}
        except (OSError, yaml.YAMLError) as e:
            CONSOLE.print(Text(f'Ignoring unreadable {self.dependencies_file}: {e}', style=Style.warning))
            return {}

        if not isinstance(document, dict):
            CONSOLE.print(Text(f'Ignoring {self.dependencies_file}: not a mapping', style=Style.warning))
            return {}
        return document

    def read(self, unit: str) -> DependencySpec:
        entry = self.read_document().get(unit) or {}
        return DependencySpec(
            required=list(entry.get('required') or []),
            optional=list(entry.get('optional') or []),
            internal=list(entry.get('internal') or []),
            colocated=list(entry.get('colocated', self.default_colocated.get(unit, [])) or []),
            description=entry.get('description') or '',
        )

    def colocated(self, unit: str) -> list[str]:
        return self.read(unit).colocated
