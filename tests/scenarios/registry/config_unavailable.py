import vedro
from vedro import catched

from contexts.stackvo_root import stackvo_root
from contexts.stackvo_service import stackvo_service
from stackvod.errors.config import ConfigUnavailable


class Scenario(vedro.Scenario):
    async def given_root_without_env_file(self):
        self.root = stackvo_root()
        (self.root / '.env').unlink()
        self.stackvo = stackvo_service(self.root)

    async def when_user_lists_services(self):
        with catched(ConfigUnavailable) as self.exc_info:
            await self.stackvo.service.list_services()

    async def then_it_should_raise_config_unavailable(self):
        assert self.exc_info.type is ConfigUnavailable
        assert self.exc_info.value.kind == 'ConfigUnavailable'
