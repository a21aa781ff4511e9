"""Pydantic schemas shared across the app."""

from .realtime import (
    ClientMessage,
    ErrorMessage,
    MessageFormatError,
    ProfileSnapshot,
    ProfileUpdateMessage,
    ServerMessage,
    UnknownMessageTypeError,
    encode_message,
    parse_client_message,
    parse_server_message,
)

__all__ = [
    "ClientMessage",
    "ErrorMessage",
    "MessageFormatError",
    "ProfileSnapshot",
    "ProfileUpdateMessage",
    "ServerMessage",
    "UnknownMessageTypeError",
    "encode_message",
    "parse_client_message",
    "parse_server_message",
]
