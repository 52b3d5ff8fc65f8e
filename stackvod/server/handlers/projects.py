from typing import Any
from typing import TypedDict

from aiohttp import web
from aiohttp.web_request import Request

from stackvod.core.projects import ProjectRequest
from stackvod.server.app_keys import SERVICE_KEY
from stackvod.server.errors import read_json


class BuildResponseParams(TypedDict):
    success: bool
    message: str
    job: dict[str, Any]


class CreateProjectResponseParams(TypedDict):
    success: bool
    message: str
    project: dict[str, Any]
    job: dict[str, Any]


async def http_build_project(request: Request) -> web.Response:
    name = request.match_info['name']
    job = request.app[SERVICE_KEY].build(name)
    return web.json_response(BuildResponseParams(
        success=True,
        message=f'Build of {name} started',
        job=job.as_json(),
    ), status=202)


async def http_create_project(request: Request) -> web.Response:
    params: ProjectRequest = await read_json(request)
    project, job = await request.app[SERVICE_KEY].create_project(params)
    return web.json_response(CreateProjectResponseParams(
        success=True,
        message=f'Project {project["name"]} created, build started',
        project=project,
        job=job.as_json(),
    ), status=201)


async def http_delete_project(request: Request) -> web.Response:
    name = request.match_info['name']
    await request.app[SERVICE_KEY].delete_project(name)
    return web.json_response({'success': True, 'message': f'Project {name} deleted'}, status=200)
