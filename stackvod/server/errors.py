from typing import TypedDict

from aiohttp import web
from aiohttp.web_request import Request
from rich.text import Text

from stackvod.errors.base import InvalidRequest
from stackvod.errors.base import NotFound
from stackvod.errors.base import StackvoError
from stackvod.errors.lifecycle import DependencyCycle
from stackvod.errors.projects import ProjectExists
from stackvod.output.console import CONSOLE
from stackvod.output.styles import Style

ERROR_STATUSES = {
    NotFound: 404,
    ProjectExists: 409,
    DependencyCycle: 409,
    InvalidRequest: 400,
}


class ErrorParams(TypedDict):
    kind: str
    message: str


class ErrorResponseParams(TypedDict):
    success: bool
    error: ErrorParams


def error_status(error: StackvoError) -> int:
    for error_type, status in ERROR_STATUSES.items():
        if isinstance(error, error_type):
            return status
    return 500


async def read_json(request: Request) -> dict:
    if not request.can_read_body:
        return {}
    try:
        params = await request.json()
    except ValueError as e:
        raise InvalidRequest(f'Request body is not valid json: {e}') from e
    if not isinstance(params, dict):
        raise InvalidRequest('Request body should be a json object')
    return params


@web.middleware
async def error_middleware(request: Request, handler) -> web.StreamResponse:
    try:
        return await handler(request)
    except StackvoError as e:
        status = error_status(e)
        if status >= 500:
            CONSOLE.print(Text(f'{request.method} {request.path} failed: {e.message}', style=Style.bad))
        return web.json_response(
            ErrorResponseParams(success=False, error=ErrorParams(kind=e.kind, message=e.message)),
            status=status,
        )
