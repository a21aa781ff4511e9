"""Realtime hub for the `/ws` endpoint.

Tracks every open WebSocket, answers AI analysis requests on the requesting
connection, forwards tracking control messages to the profile scheduler and
fans profile updates out to every connection. Single-process, in-memory.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Protocol

from fastapi.concurrency import run_in_threadpool

from algoz.schemas.base import CamelModel
from algoz.schemas.realtime import (
    DebugRequestMessage,
    DebugResponseMessage,
    ErrorMessage,
    ExplainRequestMessage,
    ExplainResponseMessage,
    MessageFormatError,
    StartProfileUpdatesMessage,
    StopProfileUpdatesMessage,
    UnknownMessageTypeError,
    encode_message,
    parse_client_message,
)

if TYPE_CHECKING:
    from algoz.services.ai_analysis import AIAnalysisService
    from algoz.services.profile_scheduler import ProfileUpdateScheduler

logger = logging.getLogger(__name__)

INVALID_MESSAGE = "Invalid message format"
UNSUPPORTED_MESSAGE = "Unsupported message type"
PROCESSING_FAILED = "Failed to process request"
DEBUG_FAILED = "Failed to generate debug analysis"
EXPLAIN_FAILED = "Failed to generate explanation"
UPDATES_UNAVAILABLE = "Real-time profile updates are unavailable"


class Connection(Protocol):
    async def accept(self) -> None: ...

    async def send_text(self, data: str) -> None: ...


class ConnectionHub:
    """Tracks WebSocket connections, dispatches inbound envelopes and broadcasts."""

    def __init__(
        self,
        *,
        analysis: AIAnalysisService | None = None,
        scheduler: ProfileUpdateScheduler | None = None,
    ) -> None:
        self._connections: set[Any] = set()
        self._analysis = analysis
        self._scheduler = scheduler
        self._handlers: dict[type, Callable[[Any, Any], Awaitable[None]]] = {
            DebugRequestMessage: self._handle_debug,
            ExplainRequestMessage: self._handle_explain,
            StartProfileUpdatesMessage: self._handle_start_updates,
            StopProfileUpdatesMessage: self._handle_stop_updates,
        }

    def attach_scheduler(self, scheduler: ProfileUpdateScheduler) -> None:
        self._scheduler = scheduler

    @property
    def scheduler(self) -> ProfileUpdateScheduler | None:
        return self._scheduler

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    def is_connected(self, websocket: Connection) -> bool:
        return websocket in self._connections

    # ---------- lifecycle ----------

    async def accept(self, websocket: Connection) -> None:
        await websocket.accept()
        self._connections.add(websocket)
        logger.info("Client connected to WebSocket (%d open)", len(self._connections))

    def disconnect(self, websocket: Connection) -> None:
        # Tracking is keyed by user id and survives reconnects.
        if websocket in self._connections:
            self._connections.discard(websocket)
            logger.info("Client disconnected from WebSocket (%d open)", len(self._connections))

    # ---------- outbound ----------

    async def send(self, websocket: Connection, message: CamelModel) -> bool:
        try:
            await websocket.send_text(encode_message(message))
        except Exception as exc:
            logger.warning("Dropping connection after failed send: %s", exc)
            self._connections.discard(websocket)
            return False
        return True

    async def broadcast(self, message: CamelModel) -> int:
        """Send one envelope to every open connection; returns the delivery count."""
        payload = encode_message(message)
        targets = list(self._connections)
        if not targets:
            return 0

        delivered = 0
        disconnected: list[Any] = []
        for ws in targets:
            try:
                await ws.send_text(payload)
                delivered += 1
            except Exception:
                disconnected.append(ws)

        for ws in disconnected:
            self._connections.discard(ws)
        if disconnected:
            logger.info("Dropped %d connections during broadcast", len(disconnected))
        return delivered

    # ---------- inbound ----------

    async def on_message(self, websocket: Connection, raw: str | bytes) -> None:
        """Parse and dispatch one inbound payload. Never closes the connection."""
        try:
            message = parse_client_message(raw)
        except UnknownMessageTypeError as exc:
            logger.warning("Ignoring WebSocket message with unknown type %r", exc.message_type)
            await self.send(websocket, ErrorMessage(message=UNSUPPORTED_MESSAGE))
            return
        except MessageFormatError as exc:
            logger.warning("Rejected malformed WebSocket message: %s", exc)
            await self.send(websocket, ErrorMessage(message=INVALID_MESSAGE))
            return

        handler = self._handlers[type(message)]
        try:
            await handler(websocket, message)
        except Exception:
            logger.exception("WebSocket message error (type=%s)", message.type)
            await self.send(websocket, ErrorMessage(message=PROCESSING_FAILED))

    async def _handle_debug(self, websocket: Connection, message: DebugRequestMessage) -> None:
        if self._analysis is None:
            await self.send(websocket, ErrorMessage(message=DEBUG_FAILED))
            return
        try:
            response = await run_in_threadpool(
                self._analysis.debug, message.problem_statement, message.code, message.language
            )
        except Exception:
            logger.exception("WebSocket debug request error")
            await self.send(websocket, ErrorMessage(message=DEBUG_FAILED))
            return

        await self.send(websocket, DebugResponseMessage(response=response))

        if message.user_id is not None:
            await self._record(
                partial(
                    self._analysis.record_debug,
                    problem_statement=message.problem_statement,
                    code=message.code,
                    language=message.language,
                    ai_response=response,
                    user_id=message.user_id,
                ),
                kind="debug",
            )

    async def _handle_explain(self, websocket: Connection, message: ExplainRequestMessage) -> None:
        if self._analysis is None:
            await self.send(websocket, ErrorMessage(message=EXPLAIN_FAILED))
            return
        try:
            response = await run_in_threadpool(
                self._analysis.explain,
                message.problem_statement,
                message.solution_code,
                message.language,
            )
        except Exception:
            logger.exception("WebSocket explain request error")
            await self.send(websocket, ErrorMessage(message=EXPLAIN_FAILED))
            return

        await self.send(websocket, ExplainResponseMessage(response=response))

        if message.user_id is not None:
            await self._record(
                partial(
                    self._analysis.record_explain,
                    problem_statement=message.problem_statement,
                    solution_code=message.solution_code,
                    language=message.language,
                    ai_response=response,
                    user_id=message.user_id,
                ),
                kind="explain",
            )

    async def _record(self, write: Callable[[], Any], *, kind: str) -> None:
        # The response is already delivered; a failed write is only logged.
        try:
            await run_in_threadpool(write)
        except Exception:
            logger.exception("Failed to store %s session", kind)

    async def _handle_start_updates(
        self, websocket: Connection, message: StartProfileUpdatesMessage
    ) -> None:
        if self._scheduler is None:
            await self.send(websocket, ErrorMessage(message=UPDATES_UNAVAILABLE))
            return
        self._scheduler.start(message.user_id, message.handle)

    async def _handle_stop_updates(
        self, websocket: Connection, message: StopProfileUpdatesMessage
    ) -> None:
        if self._scheduler is None:
            await self.send(websocket, ErrorMessage(message=UPDATES_UNAVAILABLE))
            return
        self._scheduler.stop(message.user_id)


__all__ = ["ConnectionHub"]
