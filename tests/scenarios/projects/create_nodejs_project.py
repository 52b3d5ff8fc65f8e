import json

import vedro

from contexts.build_stages import shell_build_stages
from contexts.stackvo_root import stackvo_root
from contexts.stackvo_service import stackvo_service


class Scenario(vedro.Scenario):
    async def given_empty_projects_dir(self):
        self.root = stackvo_root()
        self.stackvo = stackvo_service(self.root, build_stages=shell_build_stages())

    async def when_user_creates_nodejs_project(self):
        self.config, self.job = await self.stackvo.service.create_project({
            'name': 'api.v2',
            'runtime': 'nodejs',
            'version': '20',
            'domain': 'api.example.loc',
            'document_root': 'dist',
        })
        await self.stackvo.service.wait_job(self.job.id)

    async def then_it_should_write_runtime_without_extensions(self):
        project = self.root / 'projects' / 'api.v2'
        config = json.loads((project / 'stackvo.json').read_text())
        assert config['nodejs'] == {'version': '20'}
        assert config['domain'] == 'api.example.loc'

    async def then_it_should_scaffold_html_index(self):
        index = self.root / 'projects' / 'api.v2' / 'dist' / 'index.html'
        assert 'nodejs 20' in index.read_text()
