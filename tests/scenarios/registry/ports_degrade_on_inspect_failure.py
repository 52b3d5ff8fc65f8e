import vedro

from contexts.stackvo_root import stackvo_root
from contexts.stackvo_service import stackvo_service
from stackvod.core.unit_types import NetworkInfo


class Scenario(vedro.Scenario):
    async def given_running_services_one_failing_inspect(self):
        self.stackvo = stackvo_service(stackvo_root(env='SERVICE_REDIS_ENABLE=true\nSERVICE_MYSQL_ENABLE=true\n'))
        self.stackvo.docker.add_container('stackvo-redis', ports={
            '6379/tcp': [{'HostIp': '0.0.0.0', 'HostPort': '6379'}],
            '16379/tcp': None,
        })
        self.stackvo.docker.add_container('stackvo-mysql')
        self.stackvo.docker.broken_inspect.add('stackvo-mysql')

    async def when_user_lists_services(self):
        self.services = {unit.name: unit for unit in await self.stackvo.service.list_services()}

    async def then_it_should_still_list_both_running(self):
        assert self.services['redis'].running is True
        assert self.services['mysql'].running is True

    async def then_it_should_degrade_failing_unit_ports(self):
        assert self.services['mysql'].ports == NetworkInfo()

    async def then_it_should_describe_ports_of_healthy_unit(self):
        ports = self.services['redis'].ports
        assert ports.ports == {
            '6379/tcp': {'docker_port': '6379/tcp', 'host_ip': '0.0.0.0', 'host_port': '6379', 'exposed': True},
            '16379/tcp': {'docker_port': '16379/tcp', 'exposed': False},
        }
        assert (ports.ip_address, ports.network, ports.gateway) == ('172.30.0.5', 'stackvo-net', '172.30.0.1')
