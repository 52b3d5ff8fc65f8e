import vedro
from d42 import schema

from contexts.stackvo_root import stackvo_root
from contexts.stackvo_service import stackvo_service
from contexts.stackvod_server import stackvod_server
from interfaces.stackvod_api import StackvodApi
from schemas.http_codes import HTTPStatusCodeOk


class Scenario(vedro.Scenario):
    async def given_running_containers(self):
        self.stackvo = stackvo_service(stackvo_root())
        self.stackvo.docker.add_container('stackvo-redis')
        self.stackvo.docker.add_container('stackvo-mysql', state='exited')
        self.api = StackvodApi(await stackvod_server(self.stackvo.service))

    async def when_user_restarts_all(self):
        self.response = await self.api.bulk('restart-all')

    async def then_it_should_restart_running_containers_only(self):
        assert self.response.status_code == HTTPStatusCodeOk
        assert self.response.json() == schema.dict({
            'success': schema.bool(True),
            'total': schema.int(1),
            'results': schema.list([
                schema.dict({'container': schema.str('stackvo-redis'), 'status': schema.str('restarted')}),
            ]),
        })
        assert ('restart', 'stackvo-mysql') not in self.stackvo.docker.calls
