from aiohttp import web

from stackvod.core.config import Config
from stackvod.core.service import StackvoService
from stackvod.core.service import StackvoServiceManager
from stackvod.server.app_keys import SERVICE_KEY
from stackvod.server.commands import DEPENDENCIES_PATH
from stackvod.server.commands import DOCKER_BULK_PATH
from stackvod.server.commands import EVENTS_PATH
from stackvod.server.commands import HEALTHCHECK_PATH
from stackvod.server.commands import JOB_CANCEL_PATH
from stackvod.server.commands import JOB_PATH
from stackvod.server.commands import PROJECT_BUILD_PATH
from stackvod.server.commands import PROJECT_CREATE_PATH
from stackvod.server.commands import PROJECT_PATH
from stackvod.server.commands import UNIT_ACTION_PATH
from stackvod.server.commands import UNITS_PATH
from stackvod.server.errors import error_middleware
from stackvod.server.handlers.docker import http_bulk_action
from stackvod.server.handlers.events import http_events
from stackvod.server.handlers.healthcheck import healthcheck
from stackvod.server.handlers.jobs import http_cancel_job
from stackvod.server.handlers.jobs import http_get_job
from stackvod.server.handlers.projects import http_build_project
from stackvod.server.handlers.projects import http_create_project
from stackvod.server.handlers.projects import http_delete_project
from stackvod.server.handlers.units import http_get_dependencies
from stackvod.server.handlers.units import http_list_units
from stackvod.server.handlers.units import http_unit_action


def make_app(service: StackvoService | None = None) -> web.Application:
    app = web.Application(middlewares=[error_middleware])
    app[SERVICE_KEY] = service or StackvoServiceManager().get()
    app.add_routes([
        web.get(HEALTHCHECK_PATH, healthcheck),
        web.get(EVENTS_PATH, http_events),

        # ============================
        web.get(UNITS_PATH, http_list_units),
        web.post(UNIT_ACTION_PATH, http_unit_action),
        web.get(DEPENDENCIES_PATH, http_get_dependencies),

        web.post(PROJECT_CREATE_PATH, http_create_project),
        web.post(PROJECT_BUILD_PATH, http_build_project),
        web.delete(PROJECT_PATH, http_delete_project),

        web.get(JOB_PATH, http_get_job),
        web.post(JOB_CANCEL_PATH, http_cancel_job),

        web.post(DOCKER_BULK_PATH, http_bulk_action),
    ])
    return app


def run_server():
    web.run_app(make_app(), port=Config().port)
