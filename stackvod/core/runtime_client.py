import asyncio
from functools import partial
from typing import Any
from typing import Callable

from docker import APIClient
from docker.errors import DockerException
from docker.errors import NotFound as DockerNotFound
from rich.text import Text

from stackvod.core.unit_types import ContainerInfo
from stackvod.core.unit_types import NetworkInfo
from stackvod.errors.base import NotFound
from stackvod.errors.lifecycle import ContainerOperationFailed
from stackvod.output.console import CONSOLE
from stackvod.output.styles import Style


class DockerRuntimeClient:
    """
    Engine API over the local control socket.

    The docker SDK is blocking, calls run in the default executor.
    """

    def __init__(self, base_url: str, api_client: APIClient | None = None):
        self.base_url = base_url
        self._api = api_client

    @property
    def api(self) -> APIClient:
        if self._api is None:
            self._api = APIClient(base_url=self.base_url)
        return self._api

    async def _call(self, fn: Callable[..., Any], *args, **kwargs) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(fn, *args, **kwargs))

    async def _container_call(self, operation: str, container: str, fn: Callable[..., Any], *args, **kwargs) -> Any:
        try:
            return await self._call(fn, container, *args, **kwargs)
        except DockerNotFound as e:
            raise NotFound('container', container) from e
        except DockerException as e:
            raise ContainerOperationFailed(container, operation, str(e)) from e

    async def list_containers(self) -> list[ContainerInfo]:
        try:
            containers = await self._call(self.api.containers, all=True)
        except DockerException as e:
            raise ContainerOperationFailed('*', 'list', str(e)) from e
        return [ContainerInfo.from_api(container) for container in containers]

    async def find_container(self, name: str) -> ContainerInfo | None:
        for container in await self.list_containers():
            if container.name == name:
                return container
        return None

    async def inspect_network(self, container: str) -> NetworkInfo:
        inspect = await self._container_call('inspect', container, self.api.inspect_container)
        return NetworkInfo.from_inspect(inspect)

    async def container_image_id(self, container: str) -> str | None:
        try:
            inspect = await self._container_call('inspect', container, self.api.inspect_container)
        except (NotFound, ContainerOperationFailed) as e:
            CONSOLE.print(Text(f'Could not inspect container for image: {e}', style=Style.context))
            return None
        return inspect.get('Image')

    async def start(self, container: str) -> None:
        await self._container_call('start', container, self.api.start)

    async def stop(self, container: str) -> None:
        await self._container_call('stop', container, self.api.stop)

    async def restart(self, container: str) -> None:
        await self._container_call('restart', container, self.api.restart)

    async def remove_container(self, container: str) -> bool:
        try:
            await self._container_call('remove', container, self.api.remove_container, force=True)
        except NotFound:
            return False
        return True

    async def find_images(self, pattern: str) -> list[str]:
        try:
            images = await self._call(self.api.images, filters={'reference': pattern})
        except DockerException as e:
            raise ContainerOperationFailed(pattern, 'list images for', str(e)) from e
        return [(image.get('RepoTags') or [image['Id']])[0] for image in images]

    async def remove_image(self, image: str) -> None:
        try:
            await self._call(self.api.remove_image, image, force=True)
        except DockerNotFound as e:
            raise NotFound('image', image) from e
        except DockerException as e:
            raise ContainerOperationFailed(image, 'remove image of', str(e)) from e

    async def find_volumes(self, prefix: str) -> list[str]:
        try:
            volumes = await self._call(self.api.volumes, filters={'name': prefix})
        except DockerException as e:
            raise ContainerOperationFailed(prefix, 'list volumes for', str(e)) from e
        return [
            volume['Name']
            for volume in (volumes or {}).get('Volumes') or []
            if volume['Name'].startswith(prefix)
        ]

    async def remove_volume(self, volume: str) -> None:
        try:
            await self._call(self.api.remove_volume, volume, force=True)
        except DockerNotFound as e:
            raise NotFound('volume', volume) from e
        except DockerException as e:
            raise ContainerOperationFailed(volume, 'remove volume of', str(e)) from e
