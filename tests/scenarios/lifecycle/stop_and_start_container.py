import vedro

from contexts.stackvo_root import stackvo_root
from contexts.stackvo_service import stackvo_service
from stackvod.core.unit_types import UnitKind


class Scenario(vedro.Scenario):
    async def given_running_redis(self):
        self.stackvo = stackvo_service(stackvo_root(env='SERVICE_REDIS_ENABLE=true\n'))
        self.stackvo.docker.add_container('stackvo-redis')

    async def given_services_listed(self):
        services = await self.stackvo.service.list_services()
        assert [unit.running for unit in services] == [True]

    async def when_user_stops_redis(self):
        self.result = await self.stackvo.service.stop(UnitKind.SERVICE, 'redis')

    async def then_it_should_stop_container(self):
        assert self.result.running is False
        assert self.stackvo.docker.containers_by_name['stackvo-redis']['State'] == 'exited'

    async def then_it_should_emit_stopping_and_stopped(self):
        assert self.stackvo.sink.names() == ['service:stopping', 'service:stopped']

    async def then_registry_should_reflect_stop(self):
        services = await self.stackvo.service.list_services()
        assert [(unit.running, unit.status) for unit in services] == [(False, 'exited')]

    async def and_user_can_start_it_again(self):
        result = await self.stackvo.service.start(UnitKind.SERVICE, 'redis')
        assert result.running is True
        assert self.stackvo.docker.containers_by_name['stackvo-redis']['State'] == 'running'
