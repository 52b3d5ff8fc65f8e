import vedro
from vedro import catched

from contexts.stackvo_root import stackvo_root
from contexts.stackvo_service import stackvo_service
from stackvod.errors.base import NotFound


class Scenario(vedro.Scenario):
    async def given_root_without_projects(self):
        self.stackvo = stackvo_service(stackvo_root())

    async def when_user_builds_unknown_project(self):
        with catched(NotFound) as self.exc_info:
            self.stackvo.service.build('ghost')

    async def then_it_should_raise_not_found(self):
        assert self.exc_info.type is NotFound

    async def then_no_build_should_start(self):
        assert self.stackvo.sink.payloads('build:start') == []
