from aiohttp import web

from stackvod.core.service import StackvoService

SERVICE_KEY = web.AppKey('stackvod_service', StackvoService)
