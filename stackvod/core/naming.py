"""
Naming convention shared by every runtime lookup.

Containers are `<prefix>-<unit>`, volumes of a unit start with the same string,
images of a unit are searched with `*<unit>*`, persisted flags are
`<NAMESPACE>_<UNIT>_<SUFFIX>` where `-` in unit names becomes `_`.
"""
from stackvod.core.unit_types import UnitKind

ENV_NAMESPACES = {
    UnitKind.SERVICE: 'SERVICE',
    UnitKind.TOOL: 'TOOLS',
}

TOOLS_UNIT = 'tools'
TOOLS_PROFILE = 'tools'


class UnitNaming:
    def __init__(self, prefix: str = 'stackvo', domain_suffix: str = 'stackvo.loc'):
        self.prefix = prefix
        self.domain_suffix = domain_suffix

    def container(self, unit: str) -> str:
        return f'{self.prefix}-{unit}'

    def tools_container(self) -> str:
        return self.container(TOOLS_UNIT)

    def volume_prefix(self, unit: str) -> str:
        return self.container(unit)

    def image_pattern(self, unit: str) -> str:
        return f'*{unit}*'

    def project_image(self, project: str) -> str:
        return f'{self.container(project)}:latest'

    def env_token(self, unit: str) -> str:
        return unit.upper().replace('-', '_')

    def unit_from_env_token(self, token: str) -> str:
        return token.lower().replace('_', '-')

    def env_key(self, kind: UnitKind, unit: str, suffix: str = 'ENABLE') -> str:
        return f'{ENV_NAMESPACES[kind]}_{self.env_token(unit)}_{suffix}'

    def url(self, raw: str) -> str:
        raw = raw.strip()
        if raw.startswith('http://') or raw.startswith('https://'):
            return raw
        return f'https://{raw}.{self.domain_suffix}'

    @staticmethod
    def domain(url: str | None) -> str | None:
        if not url:
            return None
        return url.replace('https://', '').replace('http://', '').split('/')[0]
