import vedro

from stackvod.core.config import Config


class Scenario(vedro.Scenario):
    async def given_environ(self):
        self.environ = {
            'STACKVO_ROOT': '/opt/stackvo',
            'DOCKER_SOCKET': '/var/run/docker.sock',
            'CACHE_TTL': '2.5',
            'COLOCATED_CONTAINERS': 'kafka:zookeeper;elk:logstash,kibana',
            'NON_STOP_CONTAINERS': 'stackvo-ui',
        }

    async def when_config_is_read(self):
        self.config = Config(self.environ)

    async def then_it_should_resolve_paths_from_root(self):
        assert str(self.config.env_file_path) == '/opt/stackvo/.env'
        assert str(self.config.generate_script) == '/opt/stackvo/core/cli/stackvo.sh'
        assert str(self.config.dependencies_file) == '/opt/stackvo/config/serviceDependencies.json'

    async def then_it_should_turn_socket_path_into_url(self):
        assert self.config.docker_host == 'unix:///var/run/docker.sock'

    async def then_it_should_parse_lists(self):
        assert self.config.cache_ttl == 2.5
        assert self.config.non_stop_containers == ['stackvo-ui']
        assert self.config.colocated_containers == {'kafka': ['zookeeper'], 'elk': ['logstash', 'kibana']}
