import vedro

from contexts.stackvo_root import read_env
from contexts.stackvo_root import stackvo_root
from contexts.stackvo_service import stackvo_service
from stackvod.core.unit_types import UnitKind


class Scenario(vedro.Scenario):
    async def given_running_kafka_with_zookeeper(self):
        self.root = stackvo_root(env='SERVICE_KAFKA_ENABLE=true\n')
        self.stackvo = stackvo_service(self.root)
        self.stackvo.docker.add_container('stackvo-kafka')
        self.stackvo.docker.add_container('stackvo-zookeeper')
        self.stackvo.docker.add_container('stackvo-redis')

    async def when_user_disables_kafka(self):
        self.result = await self.stackvo.service.disable(UnitKind.SERVICE, 'kafka')

    async def then_it_should_succeed(self):
        assert self.result.success is True
        assert read_env(self.root)['SERVICE_KAFKA_ENABLE'] == 'false'

    async def then_it_should_remove_kafka_and_zookeeper(self):
        assert list(self.stackvo.docker.containers_by_name) == ['stackvo-redis']
