import vedro
from vedro import catched

from contexts.stackvo_root import read_env
from contexts.stackvo_root import stackvo_root
from contexts.stackvo_service import stackvo_service
from stackvod.core.unit_types import UnitKind
from stackvod.errors.lifecycle import ContainerOperationFailed


class Scenario(vedro.Scenario):
    async def given_disabled_redis(self):
        self.root = stackvo_root(env='SERVICE_REDIS_ENABLE=false\n')
        self.stackvo = stackvo_service(self.root)

    async def given_compose_failing_for_redis(self):
        self.stackvo.compose.failing.add('redis')

    async def when_user_enables_redis(self):
        with catched(ContainerOperationFailed) as self.exc_info:
            await self.stackvo.service.enable(UnitKind.SERVICE, 'redis')

    async def then_it_should_raise_container_operation_failed(self):
        assert self.exc_info.type is ContainerOperationFailed
        assert self.exc_info.value.container == 'stackvo-redis'

    async def then_it_should_roll_back_flag(self):
        assert read_env(self.root)['SERVICE_REDIS_ENABLE'] == 'false'

    async def then_it_should_report_failed_container_step(self):
        statuses = [
            (payload['step'], payload['status']) for payload in self.stackvo.sink.payloads('service:progress')
            if payload['status'] in ('done', 'failed')
        ]
        assert statuses == [('dependency', 'done'), ('env', 'done'), ('generate', 'done'), ('container', 'failed')]

    async def then_registry_should_list_redis_disabled(self):
        services = await self.stackvo.service.list_services()
        assert [(unit.name, unit.configured, unit.running) for unit in services] == [('redis', False, False)]
