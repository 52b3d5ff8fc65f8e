from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import Any
from typing import NamedTuple


class UnitKind(Enum):
    SERVICE = 'service'
    TOOL = 'tool'
    PROJECT = 'project'


class ContainerState:
    RUNNING = 'running'
    EXITED = 'exited'
    NOT_CREATED = 'not created'


@dataclass
class NetworkInfo:
    ports: dict[str, dict[str, Any]] = field(default_factory=dict)
    ip_address: str | None = None
    network: str | None = None
    gateway: str | None = None

    @classmethod
    def from_inspect(cls, inspect: dict) -> 'NetworkInfo':
        network_settings = inspect.get('NetworkSettings') or {}
        networks = network_settings.get('Networks') or {}
        first_network = next(iter(networks), None)

        ports = {}
        for docker_port, bindings in (network_settings.get('Ports') or {}).items():
            if bindings:
                ports[docker_port] = {
                    'docker_port': docker_port,
                    'host_ip': bindings[0].get('HostIp') or '0.0.0.0',
                    'host_port': bindings[0].get('HostPort'),
                    'exposed': True,
                }
            else:
                ports[docker_port] = {
                    'docker_port': docker_port,
                    'exposed': False,
                }

        gateway = network_settings.get('Gateway')
        if not gateway and first_network is not None:
            gateway = networks[first_network].get('Gateway')

        return cls(
            ports=ports,
            ip_address=network_settings.get('IPAddress') or None,
            network=first_network,
            gateway=gateway or None,
        )

    def as_json(self) -> dict[str, Any]:
        return {
            'ports': self.ports,
            'ip_address': self.ip_address,
            'network': self.network,
            'gateway': self.gateway,
        }


@dataclass
class ContainerInfo:
    name: str
    id: str
    state: str
    image: str
    created: int | None

    @classmethod
    def from_api(cls, container: dict) -> 'ContainerInfo':
        names = container.get('Names') or ['']
        return cls(
            name=names[0].lstrip('/'),
            id=container['Id'],
            state=container.get('State', ''),
            image=container.get('Image', ''),
            created=container.get('Created'),
        )

    @property
    def running(self) -> bool:
        return self.state == ContainerState.RUNNING


@dataclass
class Unit:
    name: str
    kind: UnitKind
    configured: bool
    running: bool
    status: str
    container_name: str
    container_id: str | None = None
    image: str = '-'
    ports: NetworkInfo = field(default_factory=NetworkInfo)
    created: int | None = None
    url: str | None = None
    domain: str | None = None
    version: str | None = None
    credentials: dict[str, str] = field(default_factory=dict)
    details: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    def sort_key(self) -> tuple[bool, bool, str]:
        return not self.running, not self.configured, self.name.lower()

    def as_json(self) -> dict[str, Any]:
        return {
            'name': self.name,
            'kind': self.kind.value,
            'containerName': self.container_name,
            'configured': self.configured,
            'running': self.running,
            'status': self.status,
            'id': self.container_id,
            'image': self.image,
            'ports': self.ports.as_json(),
            'created': self.created,
            'url': self.url,
            'domain': self.domain,
            'version': self.version,
            'credentials': self.credentials,
            'error': self.error,
        } | self.details


@dataclass
class DependencySpec:
    required: list[str] = field(default_factory=list)
    optional: list[str] = field(default_factory=list)
    internal: list[str] = field(default_factory=list)
    colocated: list[str] = field(default_factory=list)
    description: str = ''


class LifecycleResult(NamedTuple):
    success: bool
    message: str
    running: bool

    def as_json(self) -> dict[str, Any]:
        return self._asdict()
