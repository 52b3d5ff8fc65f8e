from fnmatch import fnmatch
from itertools import count
from threading import Event

from docker.errors import APIError
from docker.errors import NotFound

_ids = count(1)


class FakeDockerAPI:
    """
    In-memory stand-in for docker.APIClient covering the calls stackvod makes.
    """

    def __init__(self):
        self.containers_by_name: dict[str, dict] = {}
        self.images_by_id: dict[str, dict] = {}
        self.volume_names: list[str] = []
        self.broken_inspect: set[str] = set()
        self.failing: set[str] = set()
        self.calls: list[tuple] = []
        self._held_listing: Event | None = None

    def add_image(self, tag: str) -> str:
        for image in self.images_by_id.values():
            if tag in image['RepoTags']:
                return image['Id']
        image_id = f'sha256:{next(_ids):064x}'
        self.images_by_id[image_id] = {'Id': image_id, 'RepoTags': [tag]}
        return image_id

    def add_container(self, name: str, state: str = 'running', image: str | None = None,
                      ports: dict | None = None) -> dict:
        image = image or f'{name}:latest'
        container = {
            'Id': f'{next(_ids):064x}',
            'Names': [f'/{name}'],
            'State': state,
            'Image': image,
            'ImageID': self.add_image(image),
            'Created': 1700000000,
            'Ports': ports or {},
        }
        self.containers_by_name[name] = container
        return container

    def add_volume(self, name: str) -> None:
        self.volume_names.append(name)

    def hold_next_listing(self) -> Event:
        # the next containers() call blocks its executor thread until the event is set
        self._held_listing = Event()
        return self._held_listing

    def _container(self, name: str) -> dict:
        if name not in self.containers_by_name:
            raise NotFound(f'No such container: {name}')
        return self.containers_by_name[name]

    def _check_failing(self, name: str, operation: str) -> None:
        if name in self.failing:
            raise APIError(f'{operation} {name}: simulated engine failure')

    def containers(self, all: bool = False) -> list[dict]:
        self.calls.append(('containers',))
        listing = [
            {key: value for key, value in container.items() if key not in ('ImageID', 'Ports')}
            for container in self.containers_by_name.values()
            if all or container['State'] == 'running'
        ]
        held, self._held_listing = self._held_listing, None
        if held is not None:
            held.wait(timeout=10)
        return listing

    def inspect_container(self, name: str) -> dict:
        self.calls.append(('inspect_container', name))
        container = self._container(name)
        if name in self.broken_inspect:
            raise APIError(f'inspect {name}: simulated engine failure')
        return {
            'Id': container['Id'],
            'Image': container['ImageID'],
            'NetworkSettings': {
                'IPAddress': '172.30.0.5',
                'Gateway': '172.30.0.1',
                'Ports': container['Ports'],
                'Networks': {'stackvo-net': {'Gateway': '172.30.0.1'}},
            },
        }

    def start(self, name: str) -> None:
        self.calls.append(('start', name))
        self._check_failing(name, 'start')
        self._container(name)['State'] = 'running'

    def stop(self, name: str) -> None:
        self.calls.append(('stop', name))
        self._check_failing(name, 'stop')
        self._container(name)['State'] = 'exited'

    def restart(self, name: str) -> None:
        self.calls.append(('restart', name))
        self._check_failing(name, 'restart')
        self._container(name)['State'] = 'running'

    def remove_container(self, name: str, force: bool = False) -> None:
        self.calls.append(('remove_container', name))
        self._check_failing(name, 'remove')
        self._container(name)
        del self.containers_by_name[name]

    def images(self, filters: dict | None = None) -> list[dict]:
        self.calls.append(('images', filters))
        reference = (filters or {}).get('reference', '*')
        return [
            image for image in self.images_by_id.values()
            if any(fnmatch(tag, reference) for tag in image['RepoTags'])
        ]

    def remove_image(self, image: str, force: bool = False) -> None:
        self.calls.append(('remove_image', image))
        for image_id, known in list(self.images_by_id.items()):
            if image in (image_id, *known['RepoTags']):
                del self.images_by_id[image_id]
                return
        raise NotFound(f'No such image: {image}')

    def volumes(self, filters: dict | None = None) -> dict:
        self.calls.append(('volumes', filters))
        name = (filters or {}).get('name', '')
        return {'Volumes': [{'Name': volume} for volume in self.volume_names if name in volume]}

    def remove_volume(self, name: str, force: bool = False) -> None:
        self.calls.append(('remove_volume', name))
        if name not in self.volume_names:
            raise NotFound(f'No such volume: {name}')
        self.volume_names.remove(name)

    def image_tags(self) -> list[str]:
        return [tag for image in self.images_by_id.values() for tag in image['RepoTags']]
