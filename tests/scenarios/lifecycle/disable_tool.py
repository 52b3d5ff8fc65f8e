import vedro

from contexts.stackvo_root import read_env
from contexts.stackvo_root import stackvo_root
from contexts.stackvo_service import stackvo_service
from stackvod.core.unit_types import UnitKind


class Scenario(vedro.Scenario):
    async def given_the_only_enabled_tool(self):
        self.root = stackvo_root(env='TOOLS_ADMINER_ENABLE=true\n')
        self.stackvo = stackvo_service(self.root)
        self.stackvo.docker.add_container('stackvo-tools')

    async def when_user_disables_adminer(self):
        self.result = await self.stackvo.service.disable(UnitKind.TOOL, 'adminer')

    async def then_it_should_succeed(self):
        assert self.result.success is True
        assert read_env(self.root)['TOOLS_ADMINER_ENABLE'] == 'false'

    async def then_it_should_update_configuration_before_container(self):
        done_steps = [
            payload['step'] for payload in self.stackvo.sink.payloads('tool:progress')
            if payload['status'] == 'done'
        ]
        assert done_steps == ['env', 'generate', 'container']

    async def then_it_should_recreate_tools_container(self):
        assert self.stackvo.compose.calls == [
            ('down', ['stackvo-tools'], ['tools']),
            ('up', ['stackvo-tools'], ['tools'], None),
        ]
