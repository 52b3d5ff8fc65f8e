import vedro
from d42 import schema

from contexts.stackvo_root import stackvo_root
from contexts.stackvo_service import stackvo_service
from contexts.stackvod_server import stackvod_server
from interfaces.stackvod_api import StackvodApi
from schemas.http_codes import HTTPStatusCodeOk


class Scenario(vedro.Scenario):
    async def given_running_server(self):
        self.api = StackvodApi(await stackvod_server(stackvo_service(stackvo_root()).service))

    async def when_user_checks_health(self):
        self.response = await self.api.healthcheck()

    async def then_it_should_report_ok_with_version(self):
        assert self.response.status_code == HTTPStatusCodeOk
        assert self.response.json() == schema.dict({
            'status': schema.str('ok'),
            'version': schema.str.len(1, ...),
        })
