import os
from pathlib import Path
from typing import Mapping


def _flag(value: str | None) -> bool:
    return str(value).lower() in ('1', 'true', 'yes')


def _colocated(value: str) -> dict[str, list[str]]:
    # kafka:zookeeper;elk:logstash,kibana
    colocated = {}
    for pair in filter(None, value.split(';')):
        unit, _, containers = pair.partition(':')
        colocated[unit.strip()] = [name.strip() for name in containers.split(',') if name.strip()]
    return colocated


class Config:
    def __init__(self, environ: Mapping[str, str] | None = None):
        env = os.environ if environ is None else environ

        self.root: Path = Path(env.get('STACKVO_ROOT', Path.cwd().parent.parent))
        self.env_file_path: Path = self.root / env.get('STACKVO_ENV_FILE', '.env')
        self.projects_dir: Path = Path(env.get('PROJECTS_DIR', self.root / 'projects'))
        self.logs_dir: Path = Path(env.get('LOGS_DIRECTORY', self.root / 'logs' / 'services'))
        self.dependencies_file: Path = Path(env.get(
            'SERVICE_DEPENDENCIES_FILE',
            self.root / 'config' / 'serviceDependencies.json'
        ))
        self.generate_script: Path = Path(env.get('GENERATE_SCRIPT', self.root / 'core' / 'cli' / 'stackvo.sh'))

        self.docker_host: str = env.get('DOCKER_SOCKET', 'unix:///var/run/docker.sock')
        if self.docker_host.startswith('/'):
            self.docker_host = f'unix://{self.docker_host}'
        self.docker_compose_bin: str = env.get('DOCKER_COMPOSE_BIN', 'docker compose')
        self.compose_files: list[str] = env.get(
            'COMPOSE_FILES', 'generated/stackvo.yml:generated/docker-compose.dynamic.yml'
        ).split(':')
        self.projects_compose_file: str = env.get('PROJECTS_COMPOSE_FILE', 'generated/docker-compose.projects.yml')

        self.container_prefix: str = env.get('CONTAINER_PREFIX', 'stackvo')
        self.domain_suffix: str = env.get('DOMAIN_SUFFIX', 'stackvo.loc')
        self.non_stop_containers: list[str] = env.get(
            'NON_STOP_CONTAINERS', f'{self.container_prefix}-ui,{self.container_prefix}-traefik'
        ).split(',')
        self.colocated_containers: dict[str, list[str]] = _colocated(env.get('COLOCATED_CONTAINERS', 'kafka:zookeeper'))

        self.cache_ttl: float = float(env.get('CACHE_TTL', 5))
        self.ssl_enabled: bool = _flag(env.get('SSL_ENABLE'))
        self.port: int = int(env.get('PORT', 3000))

        self.verbose_docker_compose_commands = _flag(env.get('VERBOSE_DOCKER_COMPOSE_OUTPUT_TO_STDOUT', False))
        self.debug_docker_compose_commands = _flag(env.get('DEBUG_DOCKER_COMPOSE_COMMANDS', False))
