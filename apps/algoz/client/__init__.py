from .connection_manager import NOT_CONNECTED_MESSAGE, RealtimeConnectionManager

__all__ = ["NOT_CONNECTED_MESSAGE", "RealtimeConnectionManager"]
