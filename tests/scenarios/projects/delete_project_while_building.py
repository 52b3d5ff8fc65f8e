import asyncio

import vedro

from contexts.build_stages import shell_build_stages
from contexts.stackvo_root import project_dir
from contexts.stackvo_root import stackvo_root
from contexts.stackvo_service import stackvo_service
from stackvod.core.jobs import JobStatus


class Scenario(vedro.Scenario):
    async def given_project_being_built(self):
        self.root = stackvo_root()
        project_dir(self.root, 'shop', {'name': 'shop', 'php': {'version': '8.2'}})
        self.stackvo = stackvo_service(self.root, build_stages=shell_build_stages(build='sleep 30'))
        self.job = self.stackvo.service.build('shop')
        await asyncio.sleep(0.3)

    async def when_user_deletes_project(self):
        await self.stackvo.service.delete_project('shop')

    async def then_build_should_be_cancelled_first(self):
        assert self.job.status == JobStatus.CANCELLED
        sink = self.stackvo.sink
        assert sink.index('build:error', project='shop') < sink.index('project:deleted', project='shop')

    async def then_project_should_be_gone(self):
        assert not (self.root / 'projects' / 'shop').exists()
