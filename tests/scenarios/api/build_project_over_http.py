import vedro
from d42 import schema

from contexts.build_stages import shell_build_stages
from contexts.stackvo_root import project_dir
from contexts.stackvo_root import stackvo_root
from contexts.stackvo_service import stackvo_service
from contexts.stackvod_server import stackvod_server
from interfaces.stackvod_api import StackvodApi
from schemas.http_codes import HTTPStatusAccepted
from schemas.http_codes import HTTPStatusCodeOk
from schemas.job import JobSchema


class Scenario(vedro.Scenario):
    async def given_running_server_with_project(self):
        self.root = stackvo_root()
        project_dir(self.root, 'shop', {'name': 'shop', 'php': {'version': '8.2'}})
        self.stackvo = stackvo_service(self.root, build_stages=shell_build_stages())
        self.api = StackvodApi(await stackvod_server(self.stackvo.service))

    async def when_user_requests_build(self):
        self.response = await self.api.build_project('shop')

    async def then_it_should_accept_build(self):
        assert self.response.status_code == HTTPStatusAccepted
        assert self.response.json() == schema.dict({
            'success': schema.bool(True),
            'message': schema.str('Build of shop started'),
            'job': JobSchema % {'project': 'shop'},
        })

    async def and_job_should_report_success(self):
        job_id = self.response.json()['job']['id']
        await self.stackvo.service.wait_job(job_id)

        response = await self.api.job(job_id)
        assert response.status_code == HTTPStatusCodeOk
        assert response.json() == schema.dict({
            'success': schema.bool(True),
            'job': JobSchema % {'id': job_id},
        })
        assert response.json()['job']['status'] == 'succeeded'
        assert response.json()['job']['result']['success'] is True
