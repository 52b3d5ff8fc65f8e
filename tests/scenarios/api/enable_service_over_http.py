import vedro
from d42 import schema

from contexts.stackvo_root import read_env
from contexts.stackvo_root import stackvo_root
from contexts.stackvo_service import stackvo_service
from contexts.stackvod_server import stackvod_server
from interfaces.stackvod_api import StackvodApi
from schemas.http_codes import HTTPStatusCodeOk
from schemas.unit import ActionResponseSchema
from schemas.unit import UnitSchema


class Scenario(vedro.Scenario):
    async def given_running_server(self):
        self.root = stackvo_root(env='SERVICE_REDIS_ENABLE=false\nSERVICE_MYSQL_ENABLE=false\n')
        self.stackvo = stackvo_service(self.root)
        self.api = StackvodApi(await stackvod_server(self.stackvo.service))

    async def when_user_enables_redis(self):
        self.response = await self.api.unit_action('services', 'redis', 'enable')

    async def then_it_should_return_action_result(self):
        assert self.response.status_code == HTTPStatusCodeOk
        assert self.response.json() == ActionResponseSchema % {'running': True}

    async def then_it_should_persist_flag(self):
        assert read_env(self.root)['SERVICE_REDIS_ENABLE'] == 'true'

    async def and_service_list_should_show_redis_running(self):
        response = await self.api.list_units('services')
        assert response.status_code == HTTPStatusCodeOk
        assert response.json() == schema.dict({
            'success': schema.bool(True),
            'services': schema.list([
                UnitSchema % {'name': 'redis', 'running': True, 'configured': True},
                UnitSchema % {'name': 'mysql', 'running': False, 'configured': False},
            ]),
        })
