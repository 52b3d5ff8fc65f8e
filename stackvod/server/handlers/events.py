import asyncio

from aiohttp import web
from aiohttp.web_request import Request

from stackvod.core.events import BroadcastEventSink
from stackvod.errors.base import InvalidRequest
from stackvod.server.app_keys import SERVICE_KEY


async def _forward(queue: asyncio.Queue, ws: web.WebSocketResponse) -> None:
    while not ws.closed:
        message = await queue.get()
        await ws.send_json(message)


async def http_events(request: Request) -> web.WebSocketResponse:
    sink = request.app[SERVICE_KEY].sink
    if not isinstance(sink, BroadcastEventSink):
        raise InvalidRequest('Event stream is not available')

    ws = web.WebSocketResponse(heartbeat=30)
    # subscribed before the handshake, events emitted right after connect are delivered
    queue = sink.subscribe()
    try:
        await ws.prepare(request)
        forwarding = asyncio.create_task(_forward(queue, ws))
        try:
            # incoming messages are ignored, the loop ends when the client goes away
            async for _ in ws:
                pass
        finally:
            forwarding.cancel()
    finally:
        sink.unsubscribe(queue)
    return ws
