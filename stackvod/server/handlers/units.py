from typing import Any
from typing import TypedDict

from aiohttp import web
from aiohttp.web_request import Request

from stackvod.core.unit_types import UnitKind
from stackvod.server.app_keys import SERVICE_KEY

KINDS = {
    'services': UnitKind.SERVICE,
    'tools': UnitKind.TOOL,
    'projects': UnitKind.PROJECT,
}


class ActionResponseParams(TypedDict):
    success: bool
    message: str
    running: bool


async def http_list_units(request: Request) -> web.Response:
    plural = request.match_info['kind']
    units = await request.app[SERVICE_KEY].list_units(KINDS[plural])
    response: dict[str, Any] = {'success': True, plural: [unit.as_json() for unit in units]}
    return web.json_response(response, status=200)


async def http_unit_action(request: Request) -> web.Response:
    kind = KINDS[request.match_info['kind']]
    name = request.match_info['name']
    action = request.match_info['action']
    service = request.app[SERVICE_KEY]

    if action == 'enable':
        result = await service.enable(kind, name)
    elif action == 'disable':
        result = await service.disable(kind, name)
    else:
        result = await service.container_action(kind, name, action)

    return web.json_response(ActionResponseParams(
        success=result.success,
        message=result.message,
        running=result.running,
    ), status=200)


async def http_get_dependencies(request: Request) -> web.Response:
    dependencies = await request.app[SERVICE_KEY].dependencies(request.match_info['name'])
    return web.json_response({'success': True} | dependencies, status=200)
