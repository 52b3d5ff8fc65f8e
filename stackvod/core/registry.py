import asyncio
import json
import re
from pathlib import Path
from typing import Any

from rich.text import Text

from stackvod.core.env_store import ENABLE_TRUE
from stackvod.core.env_store import EnvFileStore
from stackvod.core.naming import ENV_NAMESPACES
from stackvod.core.naming import TOOLS_UNIT
from stackvod.core.naming import UnitNaming
from stackvod.core.runtime_client import DockerRuntimeClient
from stackvod.core.unit_types import ContainerInfo
from stackvod.core.unit_types import ContainerState
from stackvod.core.unit_types import NetworkInfo
from stackvod.core.unit_types import Unit
from stackvod.core.unit_types import UnitKind
from stackvod.errors.base import NotFound
from stackvod.errors.base import StackvoError
from stackvod.output.console import CONSOLE
from stackvod.output.styles import Style

PROJECT_CONFIG_FILE = 'stackvo.json'
PROJECT_RUNTIMES = ('php', 'nodejs', 'python', 'ruby', 'golang')
NOT_CREDENTIALS = ('ENABLE', 'VERSION', 'URL')

WEBSERVER_LOG_DIRS = {
    'nginx': '/var/log/nginx',
    'apache': '/var/log/apache2',
    'caddy': '/var/log/caddy',
}
CUSTOM_CONFIG_FILES = {
    'nginx': ['nginx.conf', 'default.conf'],
    'apache': ['apache.conf', 'httpd.conf'],
    'caddy': ['Caddyfile'],
    'ferron': ['ferron.yaml', 'ferron.conf'],
}
PHP_CONFIG_FILES = ['php.ini', 'php-fpm.conf']


def _enable_flags(env: dict[str, str], namespace: str) -> dict[str, bool]:
    flag = re.compile(rf'^{namespace}_([A-Z0-9_]+)_ENABLE$')
    flags = {}
    for key, value in env.items():
        matched = flag.match(key)
        if matched:
            flags[matched.group(1)] = value == ENABLE_TRUE
    return flags


def _unit_settings(env: dict[str, str], namespace: str, token: str, tokens: list[str]) -> dict[str, str]:
    # SERVICE_ACTIVEMQ_ADMIN_USER belongs to the longest known token prefix
    longer = [other for other in tokens if len(other) > len(token) and other.startswith(f'{token}_')]
    prefix = f'{namespace}_{token}_'
    settings = {}
    for key, value in env.items():
        if not key.startswith(prefix):
            continue
        if any(key.startswith(f'{namespace}_{other}_') for other in longer):
            continue
        settings[key[len(prefix):]] = value
    return settings


class UnitRegistry:
    """
    Joins persisted enable flags with the live container list.

    Pure read: nothing here mutates the runtime or the configuration.
    """

    def __init__(self, env_store: EnvFileStore, runtime: DockerRuntimeClient, naming: UnitNaming,
                 projects_dir: Path, ssl_enabled: bool = False):
        self.env_store = env_store
        self.runtime = runtime
        self.naming = naming
        self.projects_dir = projects_dir
        self.ssl_enabled = ssl_enabled

    async def _containers(self) -> dict[str, ContainerInfo]:
        return {container.name: container for container in await self.runtime.list_containers()}

    async def _network(self, container: ContainerInfo | None) -> NetworkInfo:
        if container is None or not container.running:
            return NetworkInfo()
        try:
            return await self.runtime.inspect_network(container.name)
        except StackvoError as e:
            CONSOLE.print(Text(f'Could not inspect ports of {container.name}: {e.message}', style=Style.suspicious))
            return NetworkInfo()

    async def list_units(self, kind: UnitKind) -> list[Unit]:
        if kind == UnitKind.SERVICE:
            return await self.list_services()
        if kind == UnitKind.TOOL:
            return await self.list_tools()
        return await self.list_projects()

    async def _configured_unit(self, kind: UnitKind, env: dict[str, str], token: str, tokens: list[str],
                               configured: bool, container: ContainerInfo | None, running: bool) -> Unit:
        namespace = ENV_NAMESPACES[kind]
        name = self.naming.unit_from_env_token(token)
        settings = _unit_settings(env, namespace, token, tokens)
        url = self.naming.url(settings['URL']) if settings.get('URL') else None
        version = settings.get('VERSION')

        image = container.image if container else '-'
        if container is None and version and kind == UnitKind.SERVICE:
            image = f'{name}:{version}'

        return Unit(
            name=name,
            kind=kind,
            configured=configured,
            running=running,
            status=container.state if container else ContainerState.NOT_CREATED,
            container_name=container.name if container else self.naming.container(name),
            container_id=container.id if container else None,
            image=image,
            ports=await self._network(container),
            created=container.created if container else None,
            url=url,
            domain=self.naming.domain(url),
            version=version if kind == UnitKind.SERVICE else version or 'latest',
            credentials={
                key: value for key, value in settings.items() if key not in NOT_CREDENTIALS
            } if kind == UnitKind.SERVICE else {},
        )

    async def list_services(self) -> list[Unit]:
        env = self.env_store.read()
        containers = await self._containers()
        flags = _enable_flags(env, ENV_NAMESPACES[UnitKind.SERVICE])
        tokens = list(flags)

        services = []
        for token, configured in flags.items():
            container = containers.get(self.naming.container(self.naming.unit_from_env_token(token)))
            services.append(self._configured_unit(
                UnitKind.SERVICE, env, token, tokens, configured,
                container=container,
                running=bool(container and container.running),
            ))
        services = await asyncio.gather(*services)
        return sorted(services, key=Unit.sort_key)

    async def list_tools(self) -> list[Unit]:
        env = self.env_store.read()
        containers = await self._containers()
        flags = _enable_flags(env, ENV_NAMESPACES[UnitKind.TOOL])
        tokens = list(flags)

        tools_container = containers.get(self.naming.tools_container())
        tools_running = bool(tools_container and tools_container.running)

        tools = await asyncio.gather(*[
            self._configured_unit(
                UnitKind.TOOL, env, token, tokens, configured,
                container=tools_container,
                running=configured and tools_running,
            )
            for token, configured in flags.items()
        ])
        return sorted(tools, key=Unit.sort_key)

    def _read_project_config(self, project_dir: Path) -> dict[str, Any]:
        with open(project_dir / PROJECT_CONFIG_FILE, 'r', encoding='utf-8') as config_file:
            config = json.load(config_file)
        if not isinstance(config, dict):
            raise ValueError(f'{PROJECT_CONFIG_FILE} is not an object')
        return config

    def _custom_configuration(self, project_dir: Path, webserver: str) -> dict[str, Any]:
        stackvo_dir = project_dir / '.stackvo'
        files = []
        if stackvo_dir.is_dir():
            for filename in CUSTOM_CONFIG_FILES.get(webserver, []) + PHP_CONFIG_FILES:
                if (stackvo_dir / filename).exists():
                    files.append(filename)
        return {
            'type': 'custom' if files else 'default',
            'has_custom': bool(files),
            'files': files,
        }

    async def _project(self, project_dir: Path, containers: dict[str, ContainerInfo]) -> Unit:
        try:
            config = self._read_project_config(project_dir)
        except (OSError, ValueError) as e:
            return Unit(
                name=project_dir.name,
                kind=UnitKind.PROJECT,
                configured=False,
                running=False,
                status=ContainerState.NOT_CREATED,
                container_name=self.naming.container(project_dir.name),
                error=f'Configuration file not found or invalid: {e}',
            )

        name = config.get('name') or project_dir.name
        container = containers.get(self.naming.container(name))
        running = bool(container and container.running)
        domain = config.get('domain')
        webserver = config.get('webserver') or 'nginx'
        web_logs = WEBSERVER_LOG_DIRS.get(webserver, WEBSERVER_LOG_DIRS['nginx'])

        details = {runtime: config.get(runtime) for runtime in PROJECT_RUNTIMES}
        details |= {
            'webserver': config.get('webserver'),
            'document_root': config.get('document_root'),
            'ssl_enabled': self.ssl_enabled,
            'container_exists': container is not None,
            'urls': {
                'https': f'https://{domain}' if domain else None,
                'http': f'http://{domain}' if domain else None,
                'primary': (f'https://{domain}' if self.ssl_enabled else f'http://{domain}') if domain else None,
            },
            'project_path': {
                'container_path': '/var/www/html',
                'host_path': f'projects/{project_dir.name}',
            },
            'logs': {
                'web_access': {
                    'container_path': f'{web_logs}/access.log',
                    'host_path': f'logs/projects/{name}/access.log',
                },
                'web_error': {
                    'container_path': f'{web_logs}/error.log',
                    'host_path': f'logs/projects/{name}/error.log',
                },
                'php_error': {
                    'container_path': f'/var/log/{name}/php-error.log',
                    'host_path': f'logs/projects/{name}/php-error.log',
                },
            } if running else None,
            'configuration': self._custom_configuration(project_dir, webserver),
        }

        return Unit(
            name=name,
            kind=UnitKind.PROJECT,
            configured=True,
            running=running,
            status=container.state if container else ContainerState.NOT_CREATED,
            container_name=container.name if container else self.naming.container(name),
            container_id=container.id if container else None,
            image=container.image if container else '-',
            ports=await self._network(container),
            created=container.created if container else None,
            domain=domain,
            details=details,
        )

    async def list_projects(self) -> list[Unit]:
        if not self.projects_dir.is_dir():
            CONSOLE.print(Text(f'Projects directory not found: {self.projects_dir}', style=Style.suspicious))
            return []

        containers = await self._containers()
        project_dirs = sorted(path for path in self.projects_dir.iterdir() if path.is_dir())
        projects = await asyncio.gather(*[self._project(project_dir, containers) for project_dir in project_dirs])
        return sorted(projects, key=Unit.sort_key)

    async def get(self, kind: UnitKind, name: str) -> Unit:
        for unit in await self.list_units(kind):
            if unit.name == name:
                return unit
        raise NotFound(kind.value, name)

    async def is_running(self, name: str) -> bool:
        try:
            container = await self.runtime.find_container(self.naming.container(name))
        except StackvoError:
            return False
        return bool(container and container.running)

    async def is_tools_running(self) -> bool:
        return await self.is_running(TOOLS_UNIT)
