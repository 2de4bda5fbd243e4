import asyncio
import logging

from starlette.websockets import WebSocket, WebSocketDisconnect

from .controller import ReaderController

logger = logging.getLogger(__name__)


class DisplayStreamHandler:
    """Streams revealed chunks to one WebSocket client."""

    def __init__(self, controller: ReaderController):
        self._controller = controller

    async def handle_websocket(self, websocket: WebSocket) -> None:
        # Note: websocket.accept() is called by the API endpoint before this
        queue = self._controller.subscribe()
        send_task = asyncio.create_task(self._send_loop(websocket, queue))
        receive_task = asyncio.create_task(self._receive_loop(websocket))
        done, pending = await asyncio.wait(
            {send_task, receive_task},
            return_when=asyncio.FIRST_EXCEPTION,
        )
        try:
            for task in done:
                exc = task.exception()
                if exc:
                    raise exc
        except WebSocketDisconnect:
            logger.info(f"WebSocket disconnected: {websocket.client}")
        except Exception as e:
            logger.error(f"WebSocket error: {e}", exc_info=True)
        finally:
            self._controller.unsubscribe(queue)
            for t in (send_task, receive_task):
                if not t.done():
                    t.cancel()
            await asyncio.gather(send_task, receive_task, return_exceptions=True)

            try:
                await websocket.close()
            except Exception as e:
                logger.debug(f"Error closing WebSocket: {e}")
            logger.info(f"WebSocket stream closed: {websocket.client}")

    async def _send_loop(self, websocket: WebSocket, queue: asyncio.Queue) -> None:
        snapshot = self._controller.snapshot()
        await websocket.send_json({"type": "reader.state", **snapshot.model_dump(mode="json")})
        while True:
            chunk = await queue.get()
            await websocket.send_json({"type": "reader.chunk", **chunk.model_dump(mode="json")})

    async def _receive_loop(self, websocket: WebSocket) -> None:
        # Clients only listen; reading is how a disconnect gets noticed.
        while True:
            message = await websocket.receive_text()
            logger.debug(f"Ignoring client message: {message[:80]}")
