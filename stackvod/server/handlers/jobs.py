from aiohttp import web
from aiohttp.web_request import Request

from stackvod.server.app_keys import SERVICE_KEY


async def http_get_job(request: Request) -> web.Response:
    job = request.app[SERVICE_KEY].job(request.match_info['job_id'])
    return web.json_response({'success': True, 'job': job.as_json()}, status=200)


async def http_cancel_job(request: Request) -> web.Response:
    job = request.app[SERVICE_KEY].cancel_job(request.match_info['job_id'])
    return web.json_response({'success': True, 'job': job.as_json()}, status=202)
