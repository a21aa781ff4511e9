"""Envelopes exchanged over the realtime websocket.

Every envelope is a JSON object tagged by ``type``. Each tag maps to exactly one
model below carrying only its own fields, and the inbound/outbound unions are
closed: anything else is rejected at parse time.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import Field, TypeAdapter, ValidationError

from algoz.core.utils import utcnow
from algoz.schemas.base import CamelModel


class MessageFormatError(ValueError):
    """Payload is not a JSON object or is missing fields required by its type."""


class UnknownMessageTypeError(MessageFormatError):
    def __init__(self, message_type: Any) -> None:
        self.message_type = message_type
        super().__init__(f"Unknown message type: {message_type!r}")


class ProfileSnapshot(CamelModel):
    """Latest profile statistics fetched from Codeforces."""

    rating: int | None = None
    max_rating: int | None = None
    rank: str | None = None
    max_rank: str | None = None
    problems_solved: int | None = None
    contests_participated: int | None = None
    profile_data: dict[str, Any] = Field(default_factory=dict)


# --- client -> server ---


class DebugRequestMessage(CamelModel):
    type: Literal["debug_request"] = "debug_request"
    problem_statement: str
    code: str
    language: str
    user_id: int | None = None


class ExplainRequestMessage(CamelModel):
    type: Literal["explain_request"] = "explain_request"
    problem_statement: str
    solution_code: str
    language: str
    user_id: int | None = None


class StartProfileUpdatesMessage(CamelModel):
    type: Literal["start_codeforces_updates"] = "start_codeforces_updates"
    user_id: int
    handle: str = Field(min_length=1)


class StopProfileUpdatesMessage(CamelModel):
    type: Literal["stop_codeforces_updates"] = "stop_codeforces_updates"
    user_id: int


ClientMessage = Annotated[
    Union[
        DebugRequestMessage,
        ExplainRequestMessage,
        StartProfileUpdatesMessage,
        StopProfileUpdatesMessage,
    ],
    Field(discriminator="type"),
]


# --- server -> client ---


class DebugResponseMessage(CamelModel):
    type: Literal["debug_response"] = "debug_response"
    response: str


class ExplainResponseMessage(CamelModel):
    type: Literal["explain_response"] = "explain_response"
    response: str


class ErrorMessage(CamelModel):
    type: Literal["error"] = "error"
    message: str


class ProfileUpdateMessage(CamelModel):
    type: Literal["codeforces_profile_update"] = "codeforces_profile_update"
    user_id: int
    handle: str
    data: ProfileSnapshot
    timestamp: datetime = Field(default_factory=utcnow)


ServerMessage = Annotated[
    Union[
        DebugResponseMessage,
        ExplainResponseMessage,
        ErrorMessage,
        ProfileUpdateMessage,
    ],
    Field(discriminator="type"),
]

_client_adapter: TypeAdapter[ClientMessage] = TypeAdapter(ClientMessage)
_server_adapter: TypeAdapter[ServerMessage] = TypeAdapter(ServerMessage)

CLIENT_MESSAGE_TYPES = frozenset(
    {"debug_request", "explain_request", "start_codeforces_updates", "stop_codeforces_updates"}
)
SERVER_MESSAGE_TYPES = frozenset(
    {"debug_response", "explain_response", "error", "codeforces_profile_update"}
)


def _load_object(raw: str | bytes) -> dict[str, Any]:
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise MessageFormatError("Message is not valid JSON") from exc
    if not isinstance(data, dict):
        raise MessageFormatError("Message must be a JSON object")
    return data


def _parse(raw: str | bytes, adapter: TypeAdapter, known: frozenset[str]):  # noqa: ANN202
    data = _load_object(raw)
    message_type = data.get("type")
    if message_type is not None and not isinstance(message_type, str):
        raise MessageFormatError("Message type must be a string")
    if message_type not in known:
        raise UnknownMessageTypeError(message_type)
    try:
        return adapter.validate_python(data)
    except ValidationError as exc:
        raise MessageFormatError(f"Invalid {message_type} payload") from exc


def parse_client_message(raw: str | bytes) -> ClientMessage:
    return _parse(raw, _client_adapter, CLIENT_MESSAGE_TYPES)


def parse_server_message(raw: str | bytes) -> ServerMessage:
    return _parse(raw, _server_adapter, SERVER_MESSAGE_TYPES)


def encode_message(message: CamelModel) -> str:
    """Serialise an envelope to its JSON wire form."""
    return message.model_dump_json(by_alias=True)


__all__ = [
    "ClientMessage",
    "DebugRequestMessage",
    "DebugResponseMessage",
    "ErrorMessage",
    "ExplainRequestMessage",
    "ExplainResponseMessage",
    "MessageFormatError",
    "ProfileSnapshot",
    "ProfileUpdateMessage",
    "ServerMessage",
    "StartProfileUpdatesMessage",
    "StopProfileUpdatesMessage",
    "UnknownMessageTypeError",
    "encode_message",
    "parse_client_message",
    "parse_server_message",
]
