"""Client side of the realtime websocket.

`RealtimeConnectionManager` keeps one connection to the server's `/ws` endpoint,
reconnects with a fixed delay up to a configured number of attempts and fans
inbound envelopes out to per-type subscribers. Outbound messages are never
queued: sending while disconnected notifies error subscribers and drops the
message.

Lifecycle is explicit (`start()` / `dispose()`), so any number of independent
managers can exist in one process.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, Optional, Protocol

import websockets

from algoz.core.settings import settings
from algoz.schemas.base import CamelModel
from algoz.schemas.realtime import (
    DebugRequestMessage,
    DebugResponseMessage,
    ErrorMessage,
    ExplainRequestMessage,
    ExplainResponseMessage,
    MessageFormatError,
    ProfileUpdateMessage,
    StartProfileUpdatesMessage,
    StopProfileUpdatesMessage,
    UnknownMessageTypeError,
    encode_message,
    parse_server_message,
)

logger = logging.getLogger(__name__)

NOT_CONNECTED_MESSAGE = "WebSocket is not connected. Please try again later."

Handler = Callable[[Any], None]
ConnectionStateHandler = Callable[[bool], None]
Unsubscribe = Callable[[], None]


class ClientSocket(Protocol):
    async def send(self, message: str) -> None: ...

    async def close(self) -> None: ...

    def __aiter__(self): ...  # noqa: ANN204


Connector = Callable[[str], Awaitable[ClientSocket]]


async def _websockets_connect(url: str) -> ClientSocket:
    return await websockets.connect(url)


class RealtimeConnectionManager:
    def __init__(
        self,
        url: str,
        *,
        max_reconnect_attempts: Optional[int] = None,
        reconnect_interval: Optional[float] = None,
        connect: Connector | None = None,
    ) -> None:
        self.url = url
        self.max_reconnect_attempts = (
            max_reconnect_attempts
            if max_reconnect_attempts is not None
            else settings.ws_reconnect_max_attempts
        )
        self.reconnect_interval = (
            reconnect_interval
            if reconnect_interval is not None
            else settings.ws_reconnect_interval_seconds
        )
        self._connect = connect or _websockets_connect
        self._socket: ClientSocket | None = None
        self._open = False
        self._runner: asyncio.Task | None = None
        self._disposed = False
        self.reconnect_attempts = 0
        self._handlers: dict[str, list[Handler]] = defaultdict(list)
        self._state_handlers: list[ConnectionStateHandler] = []

    # ---------- lifecycle ----------

    @property
    def connected(self) -> bool:
        return self._open

    @property
    def running(self) -> bool:
        return self._runner is not None and not self._runner.done()

    async def start(self) -> None:
        if self.running:
            return
        self._disposed = False
        self.reconnect_attempts = 0
        self._runner = asyncio.get_running_loop().create_task(
            self._run(), name=f"realtime-client:{self.url}"
        )

    async def dispose(self) -> None:
        """Stop reconnecting, close the socket and drop every subscriber."""
        self._disposed = True
        runner, self._runner = self._runner, None
        if runner is not None:
            runner.cancel()
            await asyncio.gather(runner, return_exceptions=True)
        await self._close_socket()
        self._handlers.clear()
        self._state_handlers.clear()

    async def wait_stopped(self) -> None:
        """Wait until the manager stops (disposed or reconnect attempts exhausted)."""
        if self._runner is not None:
            await asyncio.gather(self._runner, return_exceptions=True)

    async def _close_socket(self) -> None:
        socket, self._socket = self._socket, None
        self._open = False
        if socket is not None:
            try:
                await socket.close()
            except Exception as exc:
                logger.debug("Ignoring error while closing websocket: %s", exc)

    async def _run(self) -> None:
        while not self._disposed:
            try:
                self._socket = await self._connect(self.url)
            except Exception as exc:
                logger.error("WebSocket connection error: %s", exc)
            else:
                self._handle_open()
                try:
                    async for raw in self._socket:
                        self.handle_message(raw)
                except asyncio.CancelledError:
                    raise
                except Exception as exc:
                    logger.warning("WebSocket connection lost: %s", exc)
                await self._close_socket()

            self._handle_close()
            if not await self._schedule_reconnect():
                return

    async def _schedule_reconnect(self) -> bool:
        if self._disposed:
            return False
        if self.reconnect_attempts >= self.max_reconnect_attempts:
            logger.error(
                "Giving up on WebSocket after %d reconnect attempts", self.reconnect_attempts
            )
            return False
        self.reconnect_attempts += 1
        logger.info(
            "Reconnecting WebSocket in %ss (attempt %d/%d)",
            self.reconnect_interval,
            self.reconnect_attempts,
            self.max_reconnect_attempts,
        )
        await asyncio.sleep(self.reconnect_interval)
        return not self._disposed

    def _handle_open(self) -> None:
        logger.info("WebSocket connection established")
        self._open = True
        self.reconnect_attempts = 0
        self._notify_state(True)

    def _handle_close(self) -> None:
        self._open = False
        self._notify_state(False)

    def _notify_state(self, connected: bool) -> None:
        for handler in list(self._state_handlers):
            try:
                handler(connected)
            except Exception:
                logger.exception("Connection-state subscriber failed")

    # ---------- inbound ----------

    def handle_message(self, raw: str | bytes) -> None:
        try:
            message = parse_server_message(raw)
        except UnknownMessageTypeError:
            return
        except MessageFormatError as exc:
            logger.error("Error handling WebSocket message: %s", exc)
            return

        if isinstance(message, ErrorMessage):
            self._dispatch("error", message.message)
        else:
            self._dispatch(message.type, message)

    def _dispatch(self, message_type: str, value: Any) -> None:
        for handler in list(self._handlers.get(message_type, ())):
            try:
                handler(value)
            except Exception:
                logger.exception("Subscriber for %s failed", message_type)

    # ---------- subscriptions ----------

    def subscribe(self, message_type: str, handler: Handler) -> Unsubscribe:
        handlers = self._handlers[message_type]
        handlers.append(handler)

        def unsubscribe() -> None:
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def on_debug_response(self, handler: Callable[[DebugResponseMessage], None]) -> Unsubscribe:
        return self.subscribe("debug_response", handler)

    def on_explain_response(
        self, handler: Callable[[ExplainResponseMessage], None]
    ) -> Unsubscribe:
        return self.subscribe("explain_response", handler)

    def on_error(self, handler: Callable[[str], None]) -> Unsubscribe:
        return self.subscribe("error", handler)

    def on_codeforces_profile_update(
        self, handler: Callable[[ProfileUpdateMessage], None]
    ) -> Unsubscribe:
        return self.subscribe("codeforces_profile_update", handler)

    def on_connection_state_change(self, handler: ConnectionStateHandler) -> Unsubscribe:
        self._state_handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._state_handlers:
                self._state_handlers.remove(handler)

        return unsubscribe

    # ---------- outbound ----------

    async def send(self, message: CamelModel) -> bool:
        """Send one envelope now, or report "not connected" and drop it."""
        if not self._open or self._socket is None:
            self._dispatch("error", NOT_CONNECTED_MESSAGE)
            return False
        try:
            await self._socket.send(encode_message(message))
        except Exception as exc:
            logger.warning("WebSocket send failed: %s", exc)
            self._dispatch("error", NOT_CONNECTED_MESSAGE)
            return False
        return True

    async def send_debug_request(
        self, problem_statement: str, code: str, language: str, user_id: int | None = None
    ) -> bool:
        return await self.send(
            DebugRequestMessage(
                problem_statement=problem_statement, code=code, language=language, user_id=user_id
            )
        )

    async def send_explain_request(
        self,
        problem_statement: str,
        solution_code: str,
        language: str,
        user_id: int | None = None,
    ) -> bool:
        return await self.send(
            ExplainRequestMessage(
                problem_statement=problem_statement,
                solution_code=solution_code,
                language=language,
                user_id=user_id,
            )
        )

    async def start_codeforces_updates(self, user_id: int, handle: str) -> bool:
        sent = await self.send(StartProfileUpdatesMessage(user_id=user_id, handle=handle))
        if sent:
            logger.info("Requested real-time updates for Codeforces profile %s", handle)
        return sent

    async def stop_codeforces_updates(self, user_id: int) -> bool:
        sent = await self.send(StopProfileUpdatesMessage(user_id=user_id))
        if sent:
            logger.info("Requested to stop real-time updates for user %s", user_id)
        return sent


__all__ = ["NOT_CONNECTED_MESSAGE", "RealtimeConnectionManager"]
