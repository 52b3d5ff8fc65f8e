import json
import re
import shutil
from pathlib import Path
from typing import Any
from typing import TypedDict

from rich.text import Text

from stackvod.core.generator import ArtifactGenerator
from stackvod.core.generator import SCOPE_PROJECTS
from stackvod.core.naming import UnitNaming
from stackvod.core.registry import PROJECT_CONFIG_FILE
from stackvod.core.registry import PROJECT_RUNTIMES
from stackvod.core.runtime_client import DockerRuntimeClient
from stackvod.errors.base import InvalidRequest
from stackvod.errors.base import NotFound
from stackvod.errors.base import StackvoError
from stackvod.errors.projects import ProjectExists
from stackvod.helpers.jobs_result import JobResult
from stackvod.output.console import CONSOLE
from stackvod.output.styles import Style

PROJECT_NAME = re.compile(r'^[a-zA-Z0-9\-_.]+$')
DEFAULT_WEBSERVER = 'nginx'
DEFAULT_DOCUMENT_ROOT = 'public'
DEFAULT_PHP_EXTENSIONS = ['pdo', 'pdo_mysql', 'mysqli']

INDEX_PAGE = '''<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>Welcome to {name}</title>
</head>
<body>
    <h1>Welcome to {name}!</h1>
    <p><strong>Project:</strong> {name}</p>
    <p><strong>Domain:</strong> {domain}</p>
    <p><strong>Runtime:</strong> {runtime_info}</p>
    <p><strong>Document Root:</strong> {document_root}</p>
    <p>Your project is ready!</p>
</body>
</html>
'''
PHP_RUNTIME_INFO = 'PHP <?php echo phpversion(); ?>'


class ProjectRequest(TypedDict, total=False):
    name: str
    runtime: str
    version: str
    domain: str
    webserver: str
    document_root: str
    extensions: list[str]


def project_config(request: ProjectRequest) -> dict[str, Any]:
    missing = [field for field in ('name', 'runtime', 'version') if not request.get(field)]
    if missing:
        raise InvalidRequest(f'Missing required fields: {", ".join(missing)}')

    name, runtime, version = request['name'], request['runtime'], request['version']
    if not PROJECT_NAME.match(name):
        raise InvalidRequest('Invalid project name. Alphanumeric, dash, underscore, and dot allowed')
    if runtime not in PROJECT_RUNTIMES:
        raise InvalidRequest(f'Unsupported runtime {runtime}, expected one of: {", ".join(PROJECT_RUNTIMES)}')

    config = {
        'name': name,
        'domain': request.get('domain') or f'{name}.loc',
        'webserver': request.get('webserver') or DEFAULT_WEBSERVER,
        'document_root': request.get('document_root') or DEFAULT_DOCUMENT_ROOT,
    }
    config[runtime] = {'version': version}
    if runtime == 'php':
        config[runtime]['extensions'] = request.get('extensions') or list(DEFAULT_PHP_EXTENSIONS)
    return config


class ProjectManager:
    def __init__(self, projects_dir: Path, runtime: DockerRuntimeClient, naming: UnitNaming,
                 generator: ArtifactGenerator):
        self.projects_dir = projects_dir
        self.runtime = runtime
        self.naming = naming
        self.generator = generator

    def path(self, name: str) -> Path:
        return self.projects_dir / name

    def _write_files(self, path: Path, runtime: str, config: dict[str, Any]) -> None:
        path.mkdir(parents=True)
        with open(path / PROJECT_CONFIG_FILE, 'w', encoding='utf-8') as config_file:
            json.dump(config, config_file, indent=2)

        document_root = path / config['document_root']
        document_root.mkdir(parents=True, exist_ok=True)
        (path / '.stackvo').mkdir(exist_ok=True)

        index_file = 'index.php' if runtime == 'php' else 'index.html'
        runtime_info = PHP_RUNTIME_INFO if runtime == 'php' else f'{runtime} {config[runtime]["version"]}'
        with open(document_root / index_file, 'w', encoding='utf-8') as index:
            index.write(INDEX_PAGE.format(
                name=config['name'],
                domain=config['domain'],
                runtime_info=runtime_info,
                document_root=config['document_root'],
            ))

    def create(self, request: ProjectRequest) -> dict[str, Any]:
        config = project_config(request)
        path = self.path(config['name'])
        if path.exists():
            raise ProjectExists(config['name'])

        try:
            self._write_files(path, request['runtime'], config)
        except OSError as e:
            shutil.rmtree(path, ignore_errors=True)
            raise InvalidRequest(f'Could not create project {config["name"]}: {e}') from e

        CONSOLE.print(Text('Created project ', style=Style.info).append(Text(config['name'], style=Style.mark)))
        return config

    def discard(self, name: str) -> None:
        shutil.rmtree(self.path(name), ignore_errors=True)

    async def delete(self, name: str) -> None:
        path = self.path(name)
        if not path.is_dir():
            raise NotFound('project', name)

        container = self.naming.container(name)
        try:
            await self.runtime.remove_container(container)
        except StackvoError as e:
            CONSOLE.print(Text(f'Removing container {container} skipped: {e.message}', style=Style.warning))

        image = self.naming.project_image(name)
        try:
            await self.runtime.remove_image(image)
        except StackvoError as e:
            CONSOLE.print(Text(f'Removing image {image} skipped: {e.message}', style=Style.warning))

        shutil.rmtree(path)

        result = await self.generator.generate(SCOPE_PROJECTS)
        if result == JobResult.BAD:
            CONSOLE.print(Text(f'Regenerating projects after deleting {name} failed', style=Style.warning))

        CONSOLE.print(Text('Deleted project ', style=Style.info).append(Text(name, style=Style.mark)))
