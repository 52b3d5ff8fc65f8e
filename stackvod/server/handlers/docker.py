from aiohttp import web
from aiohttp.web_request import Request

from stackvod.server.app_keys import SERVICE_KEY


async def http_bulk_action(request: Request) -> web.Response:
    service = request.app[SERVICE_KEY]
    action = request.match_info['action']
    if action == 'start-all':
        summary = await service.start_all()
    elif action == 'stop-all':
        summary = await service.stop_all()
    else:
        summary = await service.restart_all()
    return web.json_response({'success': True} | summary, status=200)
