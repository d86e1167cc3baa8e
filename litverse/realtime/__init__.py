from .events import InboundEvent, OutboundEvent, club_room, user_room
from .hub import RoomHub, hub
from .dispatcher import dispatch_socket_event, notify_achievements

__all__ = [
    "InboundEvent",
    "OutboundEvent",
    "RoomHub",
    "club_room",
    "dispatch_socket_event",
    "hub",
    "notify_achievements",
    "user_room",
]
